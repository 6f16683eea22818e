from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from vonage_mcp.config import Settings, get_settings
from vonage_mcp.gateway import ToolContext

ENV_VARS = (
    "VONAGE_API_KEY",
    "VONAGE_API_SECRET",
    "VONAGE_APPLICATION_ID",
    "VONAGE_PRIVATE_KEY64",
    "VONAGE_VIRTUAL_NUMBER",
    "VONAGE_WHATSAPP_NUMBER",
    "RCS_SENDER_ID",
    "VONAGE_DEFAULT_SMS_FAILOVER",
    "LOG_LEVEL",
)


class FakeGateway:
    """In-memory gateway that records every call."""

    def __init__(self) -> None:
        # raw number -> lookup response; unknown numbers resolve to None
        self.lookups: dict[str, dict[str, Any] | None] = {
            "+1 415 555 2671": {"status": 0, "international_format_number": "14155552671"},
            "+14155552671": {"status": 0, "international_format_number": "14155552671"},
        }
        self.send_response: dict[str, Any] = {
            "message_uuid": "aaaaaaaa-bbbb-cccc-dddd-0123456789ab",
            "workflow_id": "wf-1",
        }
        self.send_error: Exception | None = None
        self.balance = 12.3456
        self.applications: list[dict[str, Any]] = [{"id": "app-1", "name": "Existing"}]
        self.numbers: list[dict[str, Any]] = []
        self.lookup_calls: list[str] = []
        self.sent: list[dict[str, Any]] = []
        self.calls: list[dict[str, Any]] = []
        self.created_apps: list[str] = []
        self.number_queries: list[str | None] = []
        self.updates: list[dict[str, Any]] = []

    def basic_lookup(self, number: str) -> dict[str, Any] | None:
        self.lookup_calls.append(number)
        return self.lookups.get(number)

    def send_message(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.sent.append(payload)
        if self.send_error is not None:
            raise self.send_error
        return self.send_response

    def get_balance(self) -> float:
        return self.balance

    def create_call(self, ncco: list[dict[str, Any]], to: str, from_number: str) -> dict[str, Any]:
        self.calls.append({"ncco": ncco, "to": to, "from": from_number})
        return {"uuid": "call-1", "status": "started", "direction": "outbound"}

    def list_applications(self) -> list[dict[str, Any]]:
        return self.applications

    def create_application(self, name: str) -> dict[str, Any]:
        self.created_apps.append(name)
        return {"id": "app-new", "name": name, "keys": {"private_key": "PEM"}}

    def list_owned_numbers(self, pattern: str | None = None) -> list[dict[str, Any]]:
        self.number_queries.append(pattern)
        return self.numbers

    def update_number(self, params: dict[str, Any]) -> dict[str, Any]:
        self.updates.append(params)
        return {"error_code": "200", "error_code_label": "success"}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from an empty Vonage environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        vonage_virtual_number="15550001111",
        vonage_whatsapp_number="15550002222",
        rcs_sender_id="AcmeRCS",
    )


@pytest.fixture
def ctx(settings: Settings, gateway: FakeGateway) -> ToolContext:
    return ToolContext(settings=settings, gateway=gateway)
