"""
Channel dispatch: one code path for SMS, WhatsApp and RCS text messages.

`dispatch` resolves the channel's sender identity, normalizes the
destination through a number lookup, optionally attaches an SMS failover
entry, sends, and normalizes the provider response into a `SendResult`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, Literal

from pydantic import BaseModel, Field

from .channels import FAILOVER_CHANNEL, Channel, get_channel_config
from .errors import ConfigurationError, InvalidDestination, MissingMessage, ProviderError
from .gateway import ToolContext
from .log import get_logger
from .phone import normalize_number

logger = get_logger(__name__)

UNKNOWN: Final[str] = "unknown"

# The Messages API has returned both spellings over time; first match wins.
MESSAGE_UUID_FIELDS: Final[tuple[str, ...]] = ("messageUUID", "message_uuid")
WORKFLOW_ID_FIELDS: Final[tuple[str, ...]] = ("workflowId", "workflow_id")


class FailoverRequest(BaseModel):
    message_type: Literal["text"] = "text"
    channel: Channel
    to: str
    from_: str = Field(serialization_alias="from")
    text: str


class SendRequest(FailoverRequest):
    failover: list[FailoverRequest] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Messages API request body."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class SendResult(BaseModel):
    message_uuid: str
    workflow_id: str


def first_present(response: Mapping[str, Any], fields: tuple[str, ...], default: str = UNKNOWN) -> str:
    for field in fields:
        value = response.get(field)
        if value:
            return str(value)
    return default


def normalize_send_response(response: Any) -> SendResult:
    if not isinstance(response, Mapping):
        # SDK objects: fall back to attribute access
        response = {
            field: getattr(response, field, None)
            for field in MESSAGE_UUID_FIELDS + WORKFLOW_ID_FIELDS
        }
    return SendResult(
        message_uuid=first_present(response, MESSAGE_UUID_FIELDS),
        workflow_id=first_present(response, WORKFLOW_ID_FIELDS),
    )


def dispatch(
    ctx: ToolContext,
    channel_key: str,
    to: str,
    message: str,
    use_failover: bool = False,
) -> SendResult:
    """
    Send a text message on `channel_key` ("sms", "whatsapp" or "rcs").

    Checks run in this order and stop at the first failure: channel sender
    configured, destination resolvable, message non-empty, virtual number
    configured when failover is requested.
    """
    settings = ctx.settings
    config = get_channel_config(channel_key)

    if not config.is_configured(settings):
        logger.warning("dispatch.not_configured: channel=%s", channel_key)
        raise ConfigurationError(config.missing_sender_error)

    destination = normalize_number(ctx.gateway, to)
    if not destination:
        logger.info("dispatch.invalid_destination: channel=%s to=%s", channel_key, to)
        raise InvalidDestination(to)

    if not message:
        raise MissingMessage()

    failover_sender = FAILOVER_CHANNEL.sender(settings)
    if use_failover and not failover_sender:
        logger.warning("dispatch.failover_not_configured: channel=%s", channel_key)
        raise ConfigurationError("VONAGE_VIRTUAL_NUMBER required for failover")

    failover = None
    if use_failover:
        failover = [
            FailoverRequest(
                channel=FAILOVER_CHANNEL.channel,
                to=destination,
                from_=failover_sender,
                text=message,
            )
        ]

    request = SendRequest(
        channel=config.channel,
        to=destination,
        from_=config.sender(settings),
        text=message,
        failover=failover,
    )

    try:
        response = ctx.gateway.send_message(request.to_payload())
    except Exception as exc:
        logger.error("dispatch.send_failed: channel=%s error=%s", channel_key, exc)
        raise ProviderError(str(exc)) from exc

    result = normalize_send_response(response)
    logger.info(
        "dispatch.sent: channel=%s failover=%s message_uuid=%s workflow_id=%s",
        channel_key,
        use_failover,
        result.message_uuid,
        result.workflow_id,
    )
    return result
