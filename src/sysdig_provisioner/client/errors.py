"""Client error types."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import requests


class ClientError(Exception):
    """Base exception for Sysdig API client errors."""


class APIError(ClientError):
    """Raised when the API answers with a status outside the accepted set."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        reasons: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reasons = reasons or []


class NotFoundError(APIError):
    """Raised on HTTP 404."""


class DescriptorLookupError(ClientError):
    """Raised when a metric label descriptor cannot be resolved."""

    def __init__(self, label: str, cause: Exception) -> None:
        super().__init__(f"error getting descriptor for label {label}: {cause}")
        self.label = label


def _reasons_from_body(body: object) -> list[str]:
    """Collect human-readable reasons from a Sysdig error body.

    The API answers with either ``{"errors": [{"reason": ..., "message": ...}]}``
    or ``{"message": ...}``.
    """
    if not isinstance(body, dict):
        return []

    reasons: list[str] = []
    for err in body.get("errors") or []:
        if not isinstance(err, dict):
            continue
        parts = [str(err[k]) for k in ("reason", "message") if err.get(k)]
        if parts:
            reasons.append(": ".join(parts))
    if not reasons and body.get("message"):
        reasons.append(str(body["message"]))
    return reasons


def error_from_response(response: requests.Response) -> APIError:
    """Build a descriptive error from an unexpected response."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        body = None

    reasons = _reasons_from_body(body)
    if reasons:
        detail = "; ".join(reasons)
    else:
        detail = response.text.strip() or response.reason or "no response body"

    message = f"API returned {response.status_code}: {detail}"
    if response.request is not None:
        message = (
            f"{response.request.method} {response.url} "
            f"returned {response.status_code}: {detail}"
        )
    error_cls = NotFoundError if response.status_code == 404 else APIError
    return error_cls(response.status_code, message, reasons=reasons)
