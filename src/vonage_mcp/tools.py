"""
Tool handlers exposed by the server.

Each handler wraps one provider operation and always returns text: failures
are logged and rendered as an "Error ..." line instead of being raised.
"""

from __future__ import annotations

import json
import re
from datetime import date
from typing import Any

from .dispatch import dispatch, first_present
from .gateway import ToolContext
from .log import get_logger
from .phone import normalize_number

logger = get_logger(__name__)

# Current application linkage on an owned number, either spelling
APP_ID_FIELDS = ("app_id", "applicationId")

# Number settings carried over unchanged when relinking
PRESERVED_NUMBER_FIELDS = ("mo_http_url", "voice_status_callback")

# Voice routing the update endpoint accepts alongside an application
VOICE_CALLBACK_TYPES = ("sip", "tel")


def _dumps(value: Any, indent: int | None = None) -> str:
    return json.dumps(value, indent=indent, default=str)


def _error(action: str, exc: Exception) -> str:
    logger.exception("tools.%s_failed: error=%s", action.replace(" ", "_"), exc)
    return f"Error {action}: {exc}"


def balance(ctx: ToolContext) -> str:
    try:
        value = ctx.gateway.get_balance()
    except Exception as exc:
        return _error("getting balance", exc)
    return f"Current account balance is {value:.2f}."


def send_sms(ctx: ToolContext, to: str, message: str) -> str:
    # SMS has no fallback channel
    try:
        result = dispatch(ctx, "sms", to, message, use_failover=False)
    except Exception as exc:
        return _error("sending SMS", exc)
    return f'Message "{message}" sent to {to}: {result.message_uuid}'


def send_whatsapp(ctx: ToolContext, to: str, message: str) -> str:
    use_failover = ctx.settings.default_sms_failover
    try:
        result = dispatch(ctx, "whatsapp", to, message, use_failover=use_failover)
    except Exception as exc:
        return _error("sending WhatsApp message", exc)
    return f'WhatsApp message sent to {to}: "{message}"\nMessage UUID: {result.message_uuid}'


def send_whatsapp_with_failover(ctx: ToolContext, to: str, message: str) -> str:
    try:
        result = dispatch(ctx, "whatsapp", to, message, use_failover=True)
    except Exception as exc:
        return _error("sending WhatsApp message with failover", exc)
    return (
        f'WhatsApp message with SMS failover sent to {to}: "{message}"\n'
        f"Message UUID: {result.message_uuid}\n"
        f"Workflow ID: {result.workflow_id}"
    )


def send_rcs(ctx: ToolContext, to: str, message: str) -> str:
    use_failover = ctx.settings.default_sms_failover
    try:
        result = dispatch(ctx, "rcs", to, message, use_failover=use_failover)
    except Exception as exc:
        return _error("sending RCS message", exc)
    return f'RCS message sent to {to}: "{message}"\nMessage UUID: {result.message_uuid}'


def send_rcs_with_failover(ctx: ToolContext, to: str, message: str) -> str:
    try:
        result = dispatch(ctx, "rcs", to, message, use_failover=True)
    except Exception as exc:
        return _error("sending RCS message with failover", exc)
    return (
        f'RCS message with SMS failover sent to {to}: "{message}"\n'
        f"Message UUID: {result.message_uuid}\n"
        f"Workflow ID: {result.workflow_id}"
    )


def build_talk_ncco(message: str) -> list[dict[str, Any]]:
    """Call script with a single text-to-speech action."""
    return [{"action": "talk", "text": message}]


def outbound_voice_message(ctx: ToolContext, to: str, message: str) -> str:
    ncco = build_talk_ncco(message)
    virtual_number = ctx.settings.vonage_virtual_number
    try:
        destination = normalize_number(ctx.gateway, to)
        if not destination:
            raise ValueError(f"Invalid phone number format: {to}")
        if not message or not virtual_number:
            raise ValueError("Required parameters missing")
        result = ctx.gateway.create_call(ncco, destination, virtual_number)
    except Exception as exc:
        return _error("sending voice message", exc)
    logger.info("tools.call_created: uuid=%s", result.get("uuid", "-"))
    return f'Voice Message "{message}" sent to {to}: {_dumps(result)}'


def list_applications(ctx: ToolContext) -> str:
    try:
        applications = ctx.gateway.list_applications()
    except Exception as exc:
        return _error("listing applications", exc)
    return f"Applications: {_dumps(applications)}"


def default_application_name(today: date | None = None) -> str:
    return f"Vonage App {(today or date.today()).isoformat()}"


def create_application(ctx: ToolContext, name: str | None = None) -> str:
    application_name = name or default_application_name()
    try:
        application = ctx.gateway.create_application(application_name)
    except Exception as exc:
        return _error("creating application", exc)

    private_key = (application.get("keys") or {}).get("private_key")
    key_line = f"Private Key: {private_key}" if private_key else ""
    return (
        "Application created successfully:\n"
        f"Name: {application.get('name')}\n"
        f"Application ID: {application.get('id')}\n"
        f"{key_line}\n"
        "\n"
        f"Full details: {_dumps(application, indent=2)}"
    )


def list_purchased_numbers(ctx: ToolContext) -> str:
    try:
        numbers = ctx.gateway.list_owned_numbers()
    except Exception as exc:
        return _error("listing numbers", exc)
    return f"Numbers: {_dumps(numbers)}"


def build_link_params(number: dict[str, Any], application_id: str) -> dict[str, Any]:
    """
    Update payload for pointing `number` at `application_id`.

    The linkage itself is `app_id`. Existing inbound-SMS and status webhooks
    are kept. A voice callback is only carried over as a complete SIP/TEL
    pair; anything else is superseded by the application.
    """
    params: dict[str, Any] = {
        "country": number.get("country") or "",
        "msisdn": number.get("msisdn") or "",
        "app_id": application_id,
    }
    for field in PRESERVED_NUMBER_FIELDS:
        if number.get(field):
            params[field] = number[field]

    callback_type = number.get("voice_callback_type")
    callback_value = number.get("voice_callback_value")
    if callback_type in VOICE_CALLBACK_TYPES and callback_value:
        params["voice_callback_type"] = callback_type
        params["voice_callback_value"] = callback_value
    return params


def link_number_to_application(ctx: ToolContext, msisdn: str, application_id: str) -> str:
    application_id = re.sub(r"\s+", "", application_id)
    try:
        if not application_id:
            raise ValueError("applicationId is required")

        # Owned numbers are stored without "+" or spacing
        pattern = re.sub(r"\D", "", msisdn) or msisdn
        numbers = ctx.gateway.list_owned_numbers(pattern=pattern)
        if not numbers:
            logger.info("tools.link_not_found: msisdn=%s", msisdn)
            return f'I could not find the number "{msisdn}" attached to your account.'

        number = numbers[0]
        if first_present(number, APP_ID_FIELDS, default="") == application_id:
            return (
                f'The number "{msisdn}" is already linked to the Vonage '
                f"Application ID {application_id}."
            )

        response = ctx.gateway.update_number(build_link_params(number, application_id))
    except Exception as exc:
        return _error("linking number", exc)

    logger.info("tools.number_linked: msisdn=%s app_id=%s", msisdn, application_id)
    return (
        f'Successfully linked number "{msisdn}" to application {application_id}. '
        f"Response: {_dumps(response)}"
    )
