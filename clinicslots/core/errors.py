"""
Domain errors raised by services and mapped onto HTTP responses in one place.
Routes stay thin: they let these propagate and the app-level handler renders them.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# User-facing messages
# ---------------------------------------------------------------------------

MSG_SLOT_TAKEN = "This time slot has already been booked. Please choose another time."
MSG_SERVICE_NOT_FOUND = "Service not found"
MSG_PRACTITIONER_NOT_FOUND = "Practitioner not found"
MSG_CLINIC_NOT_FOUND = "Clinic not found"
MSG_PUBLIC_BOOKING_DISABLED = "Online booking is not enabled for this clinic"


class DomainError(Exception):
    status_code: int = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(DomainError):
    status_code = 404


class Conflict(DomainError):
    status_code = 409


class Forbidden(DomainError):
    status_code = 403


class Validation(DomainError):
    status_code = 422


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 409:
        log.info("%s on %s %s: %s", exc.__class__.__name__, request.method, request.url.path, exc.message)
    content: dict = {"detail": exc.message}
    if exc.details:
        content["context"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
