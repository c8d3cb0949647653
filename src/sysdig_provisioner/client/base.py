"""Shared plumbing for per-resource API classes."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import ValidationError

from sysdig_provisioner.client.errors import ClientError, error_from_response

if TYPE_CHECKING:
    from collections.abc import Collection

    import requests

    from sysdig_provisioner.client.models import ApiModel
    from sysdig_provisioner.client.requester import Requester

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="ApiModel")

# Accepted status codes per operation.
CREATE_OK = frozenset({200, 201})
GET_OK = frozenset({200})
UPDATE_OK = frozenset({200})
DELETE_OK = frozenset({200, 204})


def marshal(struct: ApiModel, *, envelope: str | None = None) -> bytes:
    """Serialize a struct to a JSON body, optionally wrapped as ``{envelope: {...}}``."""
    body: dict[str, Any] = struct.to_wire()
    if envelope is not None:
        body = {envelope: body}
    return json.dumps(body).encode("utf-8")


def unmarshal(response: requests.Response, model: type[M], *, envelope: str | None = None) -> M:
    """Decode a response body into *model*. Malformed bodies raise ``ClientError``."""
    try:
        body = response.json()
        if envelope is not None:
            body = body[envelope]
        return model.model_validate(body)
    except (ValueError, KeyError, TypeError, ValidationError) as exc:
        raise ClientError(f"Unexpected {model.__name__} response body: {exc}") from exc


class Client:
    """Binds a base URL to a requester and enforces accepted status codes."""

    def __init__(self, url: str, requester: Requester) -> None:
        self.url = url.rstrip("/")
        self._requester = requester

    def url_for(self, path: str, *args: str | int) -> str:
        return self.url + path.format(*args)

    def request(
        self,
        method: str,
        url: str,
        *,
        payload: bytes | None = None,
        accepted: Collection[int],
    ) -> requests.Response:
        """Issue a request; any status not in *accepted* raises ``APIError``."""
        response = self._requester.request(method, url, payload)
        if response.status_code not in accepted:
            err = error_from_response(response)
            logger.debug("Rejected response: %s", err)
            raise err
        return response


class BaseAPI:
    """Per-resource API bound to a :class:`Client`."""

    def __init__(self, client: Client) -> None:
        self._client = client
