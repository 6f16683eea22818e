from __future__ import annotations

import base64
import binascii
import os
from functools import lru_cache

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


def _env(name: str) -> str | None:
    """Read an environment variable, treating blank values as unset."""
    value = os.getenv(name, "").strip()
    return value or None


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in _TRUTHY


class Settings(BaseModel):
    # --- Vonage credentials ---
    vonage_api_key: str | None = Field(default_factory=lambda: _env("VONAGE_API_KEY"))
    vonage_api_secret: str | None = Field(default_factory=lambda: _env("VONAGE_API_SECRET"))
    vonage_application_id: str | None = Field(
        default_factory=lambda: _env("VONAGE_APPLICATION_ID")
    )
    # Base64 of the application's PEM private key, so it fits in one env var
    vonage_private_key64: str | None = Field(
        default_factory=lambda: _env("VONAGE_PRIVATE_KEY64")
    )

    # --- Sender identities, one per channel ---
    # The virtual number also originates voice calls and SMS failover.
    vonage_virtual_number: str | None = Field(
        default_factory=lambda: _env("VONAGE_VIRTUAL_NUMBER")
    )
    vonage_whatsapp_number: str | None = Field(
        default_factory=lambda: _env("VONAGE_WHATSAPP_NUMBER")
    )
    rcs_sender_id: str | None = Field(default_factory=lambda: _env("RCS_SENDER_ID"))

    # Attach SMS failover to plain WhatsApp / RCS sends as well
    default_sms_failover: bool = Field(
        default_factory=lambda: _env_flag("VONAGE_DEFAULT_SMS_FAILOVER")
    )

    log_level: str = Field(default_factory=lambda: (_env("LOG_LEVEL") or "INFO").upper())

    @property
    def private_key(self) -> str | None:
        """
        The decoded PEM private key, or None when missing or not valid base64.
        """
        if not self.vonage_private_key64:
            return None
        try:
            decoded = base64.b64decode(self.vonage_private_key64, validate=True)
        except (binascii.Error, ValueError):
            return None
        return decoded.decode("utf-8", errors="replace") or None


@lru_cache
def get_settings() -> Settings:
    return Settings()
