"""Tests for tracking code generation and bounded issuance."""

import random

import pytest
from shipping.errors import IssuanceExhausted
from shipping.shipment.tracking_code import (
    generate_tracking_code,
    is_valid_tracking_code,
    issue_tracking_code,
)


class TestGenerateTrackingCode:
    def test_format_is_trk_plus_six_digits(self):
        rng = random.Random(42)
        for _ in range(200):
            assert is_valid_tracking_code(generate_tracking_code(rng))

    def test_small_numbers_are_zero_padded(self):
        class Fixed:
            def randrange(self, _stop):
                return 42

        assert generate_tracking_code(Fixed()) == "TRK000042"

    def test_upper_bound_stays_six_digits(self):
        class Fixed:
            def randrange(self, stop):
                return stop - 1

        assert generate_tracking_code(Fixed()) == "TRK999999"


class TestIsValidTrackingCode:
    @pytest.mark.parametrize("code", ["TRK000000", "TRK123456", "TRK999999"])
    def test_valid_codes(self, code):
        assert is_valid_tracking_code(code)

    @pytest.mark.parametrize("code", ["", None, "TRK12345", "TRK1234567", "trk123456", "ABC123456", "TRK12a456"])
    def test_invalid_codes(self, code):
        assert not is_valid_tracking_code(code)


class TestIssueTrackingCode:
    def test_returns_first_free_code(self):
        code = issue_tracking_code(lambda _code: False, rng=random.Random(1))
        assert is_valid_tracking_code(code)

    def test_skips_codes_already_taken(self):
        rng = random.Random(5)
        first = generate_tracking_code(random.Random(5))
        taken = {first}

        code = issue_tracking_code(lambda c: c in taken, rng=rng)

        assert code != first
        assert is_valid_tracking_code(code)

    def test_collision_checks_are_bounded(self):
        checked = []

        def always_taken(code):
            checked.append(code)
            return True

        with pytest.raises(IssuanceExhausted):
            issue_tracking_code(always_taken, rng=random.Random(3), max_attempts=5)

        assert len(checked) == 5

    def test_default_budget_comes_from_settings(self, monkeypatch):
        from shipping import settings

        monkeypatch.setattr(settings, "TRACKING_CODE_MAX_ATTEMPTS", 3)
        checked = []

        with pytest.raises(IssuanceExhausted):
            issue_tracking_code(lambda c: checked.append(c) or True, rng=random.Random(9))

        assert len(checked) == 3

    def test_zero_budget_is_honoured(self):
        checked = []

        with pytest.raises(IssuanceExhausted):
            issue_tracking_code(lambda c: checked.append(c) or False, rng=random.Random(9), max_attempts=0)

        assert checked == []
