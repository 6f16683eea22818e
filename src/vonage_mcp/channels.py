from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .config import Settings


class Channel(StrEnum):
    """Messages API channel values."""

    SMS = "sms"
    WHATSAPP = "whatsapp"
    RCS = "rcs"


@dataclass(frozen=True)
class ChannelConfig:
    channel: Channel
    sender: Callable[[Settings], str | None]
    missing_sender_error: str

    def is_configured(self, settings: Settings) -> bool:
        return bool(self.sender(settings))


CHANNEL_CONFIGS: Final[dict[str, ChannelConfig]] = {
    "sms": ChannelConfig(
        channel=Channel.SMS,
        sender=lambda s: s.vonage_virtual_number,
        missing_sender_error="VONAGE_VIRTUAL_NUMBER is not set.",
    ),
    "whatsapp": ChannelConfig(
        channel=Channel.WHATSAPP,
        sender=lambda s: s.vonage_whatsapp_number,
        missing_sender_error="VONAGE_WHATSAPP_NUMBER is not set.",
    ),
    "rcs": ChannelConfig(
        channel=Channel.RCS,
        sender=lambda s: s.rcs_sender_id,
        missing_sender_error="RCS_SENDER_ID is not set.",
    ),
}

# Failover always goes out as SMS from the virtual number
FAILOVER_CHANNEL: Final[ChannelConfig] = CHANNEL_CONFIGS["sms"]


def get_channel_config(channel_key: str) -> ChannelConfig:
    try:
        return CHANNEL_CONFIGS[channel_key]
    except KeyError:
        raise ValueError(
            f"Unknown channel {channel_key!r}; expected one of {sorted(CHANNEL_CONFIGS)}"
        ) from None
