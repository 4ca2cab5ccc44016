"""Static shared-secret validation.

There is at most one live key. ``generate`` overwrites it, so the previous
key stops validating immediately. The credential file is re-read on every
``validate`` call.
"""

from __future__ import annotations

import hmac
import secrets
from enum import StrEnum

import structlog

from mlcli.errors import AuthError, ConfigError
from mlcli.models.state import ApiCredential
from mlcli.persistence.state import CredentialStore

_log = structlog.get_logger(component="auth.gate")

_TOKEN_BYTES = 32  # 256 bits


class AuthDecision(StrEnum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"
    MISCONFIGURED = "misconfigured"


class AccessGate:
    def __init__(self, credentials: CredentialStore) -> None:
        self._credentials = credentials

    def generate(self) -> str:
        """Create and persist a new random hex key, replacing any previous one."""
        api_key = secrets.token_hex(_TOKEN_BYTES)
        self._credentials.save(ApiCredential(api_key=api_key))
        _log.info("api_key_generated")
        return api_key

    def is_configured(self) -> bool:
        return self._credentials.load().configured

    def validate(self, presented: str | None) -> AuthDecision:
        """Compare *presented* byte-for-byte with the stored key."""
        api_key = self._credentials.load().api_key
        if not api_key:
            return AuthDecision.MISCONFIGURED
        if presented is None:
            return AuthDecision.UNAUTHORIZED
        if hmac.compare_digest(presented.encode("utf-8"), api_key.encode("utf-8")):
            return AuthDecision.AUTHORIZED
        return AuthDecision.UNAUTHORIZED

    def require(self, presented: str | None) -> None:
        """Raise ConfigError or AuthError unless *presented* is authorized."""
        decision = self.validate(presented)
        if decision == AuthDecision.MISCONFIGURED:
            raise ConfigError("API key not set. Run `mlcli auth --generate` to create one.")
        if decision == AuthDecision.UNAUTHORIZED:
            _log.warning("api_key_rejected", key_present=presented is not None)
            raise AuthError("Unauthorized. Invalid API Key.")
