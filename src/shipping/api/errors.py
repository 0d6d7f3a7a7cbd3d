"""HTTP mapping for Shipping exceptions.

Protean's handlers cover ``ValidationError`` (and with it ``InvalidStatus``
and ``PaymentNotConfirmed``); the rest are registered here.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from shipping.errors import IssuanceExhausted, PermissionDenied, StaleShipment

logger = structlog.get_logger(__name__)


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


async def _permission_denied(request: Request, exc: PermissionDenied) -> JSONResponse:
    return JSONResponse(status_code=403, content={"error": exc.message, "redirect": exc.redirect_to})


async def _stale_shipment(request: Request, exc: StaleShipment) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={
            "error": str(exc),
            "expected_revision": exc.expected_revision,
            "actual_revision": exc.actual_revision,
        },
    )


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent write rejected", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=409, content={"error": "The record was changed concurrently, reload and retry"})


async def _issuance_exhausted(request: Request, exc: IssuanceExhausted) -> JSONResponse:
    logger.error("Tracking code issuance exhausted", error=str(exc))
    return JSONResponse(
        status_code=503,
        content={"error": "Could not allocate a tracking code, please retry"},
        headers={"Retry-After": "1"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(PermissionDenied, _permission_denied)
    app.add_exception_handler(StaleShipment, _stale_shipment)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(IssuanceExhausted, _issuance_exhausted)
