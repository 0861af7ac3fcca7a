# nexsched/backend.py
"""Client for the external auth/database backend (Supabase).

When the backend is not configured every call fails with a fixed
"not configured" error so the application keeps working in demo mode.
"""

import logging
from typing import Any, Optional, Protocol

import httpx

from .config import Settings
from .errors import BackendError, BackendNotConfiguredError

logger = logging.getLogger(__name__)

NOT_CONFIGURED_SIGN_IN = "Supabase não configurado (Modo Demo). Configure SUPABASE_URL."
NOT_CONFIGURED_SIGN_UP = "Supabase não configurado (Modo Demo)."
NOT_CONFIGURED_INSERT = "Modo Demo: Dados não persistem no banco."

PROFILES_TABLE = "profiles"


class AuthBackend(Protocol):
    configured: bool

    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        ...

    def sign_up(self, email: str, password: str) -> dict[str, Any]:
        ...

    def insert(self, table: str, rows: list[dict[str, Any]]) -> None:
        ...


class UnconfiguredBackend:
    configured = False

    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        raise BackendNotConfiguredError(NOT_CONFIGURED_SIGN_IN)

    def sign_up(self, email: str, password: str) -> dict[str, Any]:
        raise BackendNotConfiguredError(NOT_CONFIGURED_SIGN_UP)

    def insert(self, table: str, rows: list[dict[str, Any]]) -> None:
        raise BackendNotConfiguredError(NOT_CONFIGURED_INSERT)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class SupabaseBackend:
    configured = True

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            base_url=url.rstrip("/"),
            headers={"apikey": anon_key, "Authorization": f"Bearer {anon_key}"},
            timeout=timeout,
            transport=transport,
        )

    def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.post(path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Supabase request failed: %s %s", path, exc)
            raise BackendError("Falha de comunicação com o Supabase.") from exc
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Supabase rejected %s: %s", path, message)
            raise BackendError(message, code=str(response.status_code))
        return response

    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        response = self._post(
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        body = response.json()
        return body.get("user") or {}

    def sign_up(self, email: str, password: str) -> dict[str, Any]:
        response = self._post("/auth/v1/signup", json={"email": email, "password": password})
        body = response.json()
        # depending on email confirmation settings the user is nested or top-level
        if "user" in body:
            return body["user"] or {}
        return body

    def insert(self, table: str, rows: list[dict[str, Any]]) -> None:
        self._post(f"/rest/v1/{table}", json=rows, headers={"Prefer": "return=minimal"})


def build_backend(settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> AuthBackend:
    if not settings.supabase_configured:
        logger.warning("Supabase keys missing. Running in demo mode with sample data.")
        return UnconfiguredBackend()
    return SupabaseBackend(
        settings.supabase_url,
        settings.supabase_anon_key,
        timeout=settings.http_timeout_seconds,
        transport=transport,
    )
