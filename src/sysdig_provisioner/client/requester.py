"""Authenticated HTTP requester for the Sysdig REST API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

from sysdig_provisioner import __version__
from sysdig_provisioner.client.errors import ClientError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class Requester:
    """Issues bearer-token authenticated JSON requests.

    One requester per API token. The underlying ``requests.Session`` keeps
    connections alive across calls; nothing else is shared between requests.
    """

    def __init__(
        self,
        token: str,
        *,
        insecure_tls: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        extra_headers: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": f"sysdig-provisioner/{__version__}",
                **(extra_headers or {}),
            }
        )
        self._verify = not insecure_tls
        self._timeout = timeout

    def request(self, method: str, url: str, payload: bytes | None = None) -> requests.Response:
        """Send a single request. Transport failures raise ``ClientError``."""
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                data=payload,
                verify=self._verify,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ClientError(f"{method} {url} failed: {exc}") from exc
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    def close(self) -> None:
        self._session.close()
