"""Cloud account (cloudauth) API for Sysdig Secure."""

from __future__ import annotations

from sysdig_provisioner.client.base import (
    CREATE_OK,
    DELETE_OK,
    GET_OK,
    UPDATE_OK,
    BaseAPI,
    marshal,
    unmarshal,
)
from sysdig_provisioner.client.models import CloudauthAccountSecure

_ACCOUNTS_PATH = "/api/cloudauth/v1/accounts"
_ACCOUNT_PATH = "/api/cloudauth/v1/accounts/{}"


class CloudauthAccountAPI(BaseAPI):
    """CRUD for ``/api/cloudauth/v1/accounts``."""

    def create(self, account: CloudauthAccountSecure) -> CloudauthAccountSecure:
        response = self._client.request(
            "POST",
            self._client.url_for(_ACCOUNTS_PATH),
            payload=marshal(account),
            accepted=CREATE_OK,
        )
        return unmarshal(response, CloudauthAccountSecure)

    def get(self, account_id: str) -> CloudauthAccountSecure:
        response = self._client.request(
            "GET", self._client.url_for(_ACCOUNT_PATH, account_id), accepted=GET_OK
        )
        return unmarshal(response, CloudauthAccountSecure)

    def update(self, account_id: str, account: CloudauthAccountSecure) -> CloudauthAccountSecure:
        response = self._client.request(
            "PUT",
            self._client.url_for(_ACCOUNT_PATH, account_id),
            payload=marshal(account),
            accepted=UPDATE_OK,
        )
        return unmarshal(response, CloudauthAccountSecure)

    def delete(self, account_id: str) -> None:
        self._client.request(
            "DELETE", self._client.url_for(_ACCOUNT_PATH, account_id), accepted=DELETE_OK
        )
