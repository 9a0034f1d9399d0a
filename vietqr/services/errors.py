"""Shared service error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


def err_bad_payload(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_BAD_PAYLOAD", message=message or "Invalid request payload", status_code=400)


def err_payload_missing(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_PAYLOAD_MISSING", message=message or "No QR payload found in link", status_code=422)


def err_invalid_amount(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_INVALID_AMOUNT", message=message or "Invalid amount format", status_code=422)
