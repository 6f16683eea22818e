"""
Narrow provider interface shared by the dispatcher and the tool handlers.

Everything here speaks plain Python data. `vonage_client.VonageGateway` is
the production implementation; tests pass an in-memory fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from .config import Settings


class Gateway(Protocol):
    def basic_lookup(self, number: str) -> dict[str, Any] | None: ...

    def send_message(self, payload: dict[str, Any]) -> dict[str, Any]: ...

    def get_balance(self) -> float: ...

    def create_call(
        self, ncco: list[dict[str, Any]], to: str, from_number: str
    ) -> dict[str, Any]: ...

    def list_applications(self) -> list[dict[str, Any]]: ...

    def create_application(self, name: str) -> dict[str, Any]: ...

    def list_owned_numbers(self, pattern: str | None = None) -> list[dict[str, Any]]: ...

    def update_number(self, params: dict[str, Any]) -> dict[str, Any]: ...


@dataclass(frozen=True)
class ToolContext:
    """Configuration and provider client, built once at startup."""

    settings: Settings
    gateway: Gateway
