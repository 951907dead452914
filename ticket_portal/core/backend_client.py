"""Hosted backend client wrapper (PostgREST table API + token auth service)."""

from __future__ import annotations

import logging
from typing import Any

import requests

from .config import AUTH_PATH, DEFAULT_REQUEST_TIMEOUT, REST_PATH
from .errors import RepositoryError, SessionError

logger = logging.getLogger(__name__)


def eq_filters(**columns: Any) -> dict[str, str]:
    """Build PostgREST equality filters, e.g. ``id=eq.42``."""
    return {name: f"eq.{value}" for name, value in columns.items()}


class BackendAPI:
    def __init__(
        self,
        url: str,
        key: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.url = url.rstrip("/")
        self.key = key
        self.timeout = timeout
        self.http = session or requests.Session()

    # ------------------ Table Methods ------------------
    def select(
        self,
        table: str,
        *,
        filters: dict[str, str] | None = None,
        columns: str = "*",
        token: str | None = None,
    ) -> list[dict[str, Any]]:
        params = {"select": columns, **(filters or {})}
        return self._rest("GET", table, params=params, token=token, stage="fetch")

    def insert(self, table: str, rows: list[dict[str, Any]], *, token: str | None = None) -> list[dict[str, Any]]:
        return self._rest("POST", table, json=rows, token=token, stage="insert")

    def update(
        self,
        table: str,
        values: dict[str, Any],
        *,
        filters: dict[str, str],
        token: str | None = None,
    ) -> list[dict[str, Any]]:
        """PATCH matching rows and return the rows actually touched."""
        return self._rest("PATCH", table, params=filters, json=values, token=token, stage="persist")

    def delete(self, table: str, *, filters: dict[str, str], token: str | None = None) -> list[dict[str, Any]]:
        return self._rest("DELETE", table, params=filters, token=token, stage="delete")

    # ------------------ Auth Methods ------------------
    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        return self._auth("POST", "/token", params={"grant_type": "password"}, json={"email": email, "password": password})

    def sign_up(self, email: str, password: str) -> dict[str, Any]:
        return self._auth("POST", "/signup", json={"email": email, "password": password})

    def sign_out(self, token: str) -> None:
        self._auth("POST", "/logout", token=token)

    # ------------------ Internal Helpers ------------------
    def _headers(self, token: str | None) -> dict[str, str]:
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {token or self.key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _rest(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        token: str | None = None,
        stage: str,
    ) -> list[dict[str, Any]]:
        url = f"{self.url}{REST_PATH}/{table}"
        try:
            resp = self.http.request(
                method, url, params=params, json=json, headers=self._headers(token), timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise RepositoryError(f"{method} {table} failed: {exc}", stage=stage) from exc
        if resp.status_code >= 400:
            raise RepositoryError(
                f"{method} {table} failed {resp.status_code}: {resp.text[:200]}",
                stage=stage,
                status_code=resp.status_code,
            )
        if resp.status_code == 204 or not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as exc:
            raise RepositoryError(
                f"{method} {table} returned a non-JSON body: {resp.text[:200]}",
                stage=stage,
                status_code=resp.status_code,
            ) from exc
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise RepositoryError(f"{method} {table} returned unexpected JSON", stage=stage, status_code=resp.status_code)
        return data

    def _auth(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        url = f"{self.url}{AUTH_PATH}{path}"
        headers = self._headers(token)
        headers.pop("Prefer")
        try:
            resp = self.http.request(method, url, params=params, json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise SessionError(f"Auth request {path} failed: {exc}") from exc
        if resp.status_code >= 400:
            logger.debug("Auth %s rejected with %s", path, resp.status_code)
            raise SessionError(f"Auth request {path} failed {resp.status_code}: {resp.text[:200]}")
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as exc:
            raise SessionError(f"Auth request {path} returned a non-JSON body: {resp.text[:200]}") from exc
        return data if isinstance(data, dict) else {}
