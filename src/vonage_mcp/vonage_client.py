from __future__ import annotations

import re
from typing import Any

from pydantic import ValidationError
from vonage import Auth, Vonage
from vonage_application import ApplicationConfig
from vonage_number_insight import BasicInsightRequest
from vonage_number_insight.errors import NumberInsightError
from vonage_numbers import ListOwnedNumbersFilter, UpdateNumberParams
from vonage_voice import CreateCallRequest, Talk

from .config import Settings, get_settings
from .log import get_logger

logger = get_logger(__name__)

MESSAGES_PATH = "/v1/messages"

# Owned-number pattern search: 0 = starts with, 1 = anywhere, 2 = ends with
SEARCH_STARTS_WITH = 0

_NCCO_ACTIONS = {"talk": Talk}


def get_vonage_client(settings: Settings | None = None) -> Vonage:
    settings = settings or get_settings()

    has_key_pair = bool(settings.vonage_api_key and settings.vonage_api_secret)
    has_application = bool(settings.vonage_application_id and settings.private_key)
    if not has_key_pair and not has_application:
        raise RuntimeError(
            "Vonage credentials are not configured "
            "(VONAGE_API_KEY / VONAGE_API_SECRET or "
            "VONAGE_APPLICATION_ID / VONAGE_PRIVATE_KEY64)"
        )

    auth = Auth(
        api_key=settings.vonage_api_key,
        api_secret=settings.vonage_api_secret,
        application_id=settings.vonage_application_id if has_application else None,
        private_key=settings.private_key if has_application else None,
    )
    return Vonage(auth)


def _dump(model: Any) -> dict[str, Any]:
    if hasattr(model, "model_dump"):
        return model.model_dump(exclude_none=True)
    return dict(model)


class VonageGateway:
    """
    Vonage implementation of `gateway.Gateway`.

    This is the only module that imports the SDK. Results are converted to
    plain dicts so callers never depend on SDK model classes.

    The client is built on first use, so missing credentials fail the call
    that needs them rather than server startup.
    """

    def __init__(self, client: Vonage | None = None, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings

    @property
    def client(self) -> Vonage:
        if self._client is None:
            self._client = get_vonage_client(self._settings)
        return self._client

    def basic_lookup(self, number: str) -> dict[str, Any] | None:
        """
        Number Insight basic lookup.

        The SDK raises on any non-zero status; that is a definitive answer
        about the number, so it is reported as None. Transport failures
        propagate.
        """
        digits = re.sub(r"\D", "", number)
        if not digits:
            return None
        try:
            response = self.client.number_insight.get_basic_info(
                BasicInsightRequest(number=digits)
            )
        except (NumberInsightError, ValidationError) as exc:
            logger.info("vonage.lookup_rejected: number=%s error=%s", number, exc)
            return None
        return _dump(response)

    def send_message(self, payload: dict[str, Any]) -> dict[str, Any]:
        # Posted directly so the failover list reaches the Messages API as-is.
        http_client = self.client.http_client
        response = http_client.post(http_client.api_host, MESSAGES_PATH, payload, "jwt")
        return response or {}

    def get_balance(self) -> float:
        return float(self.client.account.get_balance().value)

    def create_call(
        self, ncco: list[dict[str, Any]], to: str, from_number: str
    ) -> dict[str, Any]:
        actions = []
        for action in ncco:
            fields = {k: v for k, v in action.items() if k != "action"}
            actions.append(_NCCO_ACTIONS[action["action"]](**fields))

        request = CreateCallRequest(
            ncco=actions,
            to=[{"type": "phone", "number": to}],
            from_={"type": "phone", "number": from_number},
        )
        return _dump(self.client.voice.create_call(request))

    def list_applications(self) -> list[dict[str, Any]]:
        applications, _next_page = self.client.application.list_applications()
        return [_dump(app) for app in applications or []]

    def create_application(self, name: str) -> dict[str, Any]:
        application = self.client.application.create_application(
            ApplicationConfig(name=name)
        )
        return _dump(application)

    def list_owned_numbers(self, pattern: str | None = None) -> list[dict[str, Any]]:
        if pattern:
            numbers_filter = ListOwnedNumbersFilter(
                pattern=pattern, search_pattern=SEARCH_STARTS_WITH
            )
        else:
            numbers_filter = ListOwnedNumbersFilter()
        numbers, _count, _next_page = self.client.numbers.list_owned_numbers(numbers_filter)
        return [_dump(number) for number in numbers or []]

    def update_number(self, params: dict[str, Any]) -> dict[str, Any]:
        # Drop fields the update endpoint does not accept (e.g. messages callbacks)
        accepted = {k: v for k, v in params.items() if k in UpdateNumberParams.model_fields}
        return _dump(self.client.numbers.update_number(UpdateNumberParams(**accepted)))
