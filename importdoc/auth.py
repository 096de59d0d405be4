"""Access token acquisition for the document import backend."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol
from urllib.parse import urlparse

import msal
import requests

from core.settings import AUTH_AZURE_AD, AUTH_NONE, AuthConfig

from .errors import AuthenticationError, ConfigError


logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = ("localhost", "127.0.0.1", "::1")


class TokenProvider(Protocol):
    def acquire_token(self) -> Optional[str]:
        ...


class NoAuthProvider:
    """Requests go out without an Authorization header."""

    def acquire_token(self) -> Optional[str]:
        return None


def build_scope(auth: AuthConfig) -> str:
    return f"api://{auth.backend_client_id}/{auth.scopes}"


def build_authority(auth: AuthConfig) -> str:
    return f"{auth.instance.rstrip('/')}/{auth.tenant_id}"


def redirect_port(redirect_uri: str) -> Optional[int]:
    """Port for MSAL's local redirect listener, when the URI names a loopback host."""

    parsed = urlparse(redirect_uri)
    if parsed.hostname in LOOPBACK_HOSTS:
        return parsed.port
    return None


class InteractiveTokenProvider:
    """Interactive browser login through an MSAL public client application.

    The token is fetched once per run and never cached or refreshed.
    """

    def __init__(self, auth: AuthConfig, app: Any = None) -> None:
        self.auth = auth
        self._app = app

    def _get_app(self):
        if self._app is None:
            # authority discovery happens here; a bad tenant surfaces as ValueError
            try:
                self._app = msal.PublicClientApplication(
                    self.auth.client_id,
                    authority=build_authority(self.auth),
                )
            except (ValueError, requests.exceptions.RequestException) as exc:
                raise AuthenticationError(str(exc)) from exc
        return self._app

    def acquire_token(self) -> Optional[str]:
        scopes = [build_scope(self.auth)]
        logger.debug("Requesting token for scopes %s", scopes)
        app = self._get_app()
        try:
            result = app.acquire_token_interactive(
                scopes=scopes,
                port=redirect_port(self.auth.redirect_uri),
            )
        except requests.exceptions.RequestException as exc:
            raise AuthenticationError(f"Identity provider is unreachable: {exc}") from exc
        if not result or "access_token" not in result:
            result = result or {}
            reason = result.get("error_description") or result.get("error") or "Unknown error"
            raise AuthenticationError(reason)
        return result["access_token"]


def build_token_provider(auth: AuthConfig) -> TokenProvider:
    if auth.type == AUTH_NONE:
        return NoAuthProvider()
    if auth.type == AUTH_AZURE_AD:
        return InteractiveTokenProvider(auth)
    raise ConfigError(f"Unsupported auth.type '{auth.type}'")
