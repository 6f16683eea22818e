from __future__ import annotations

import sys
from typing import Annotated

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from . import tools
from .config import get_settings
from .gateway import ToolContext
from .log import configure_logging, get_logger
from .vonage_client import VonageGateway

logger = get_logger(__name__)

SERVER_NAME = "vonage-mcp-server-api-bindings"
SERVER_VERSION = "0.0.1"

E164_HINT = "in E.164 format (e.g., +14155552671)"

PhoneTo = Annotated[str, Field(description=f"Recipient phone number {E164_HINT}")]
MessageText = Annotated[str, Field(description="Text message to send")]


def create_server(ctx: ToolContext) -> FastMCP:
    """Build the tool server with every handler bound to `ctx`."""
    server = FastMCP(SERVER_NAME)

    @server.tool(
        name="balance",
        title="Account balance",
        description="Get your Vonage Account balance",
    )
    def balance() -> str:
        return tools.balance(ctx)

    @server.tool(name="SMS", title="SMS message", description="Send SMS messages with Vonage")
    def sms(to: PhoneTo, message: MessageText) -> str:
        return tools.send_sms(ctx, to, message)

    @server.tool(
        name="whatsapp-send-text",
        title="WhatsApp Text Message",
        description="Send a text message via WhatsApp using Vonage Messages API",
    )
    def whatsapp_send_text(
        to: Annotated[str, Field(description=f"Recipient WhatsApp number {E164_HINT}")],
        message: MessageText,
    ) -> str:
        return tools.send_whatsapp(ctx, to, message)

    @server.tool(
        name="whatsapp-send-text-with-sms-failover",
        title="WhatsApp Text Message with SMS Failover",
        description=(
            "Send a WhatsApp text message with automatic SMS failover using the "
            "Vonage Messages API failover feature"
        ),
    )
    def whatsapp_send_text_with_sms_failover(to: PhoneTo, message: MessageText) -> str:
        return tools.send_whatsapp_with_failover(ctx, to, message)

    @server.tool(
        name="rcs-send-text",
        title="RCS Text Message",
        description="Send a text message via RCS using Vonage Messages API",
    )
    def rcs_send_text(to: PhoneTo, message: MessageText) -> str:
        return tools.send_rcs(ctx, to, message)

    @server.tool(
        name="rcs-send-text-with-sms-failover",
        title="RCS Text Message with SMS Failover",
        description=(
            "Send an RCS text message with automatic SMS failover using the "
            "Vonage Messages API failover feature"
        ),
    )
    def rcs_send_text_with_sms_failover(to: PhoneTo, message: MessageText) -> str:
        return tools.send_rcs_with_failover(ctx, to, message)

    @server.tool(
        name="outbound-voice-message",
        title="Outbound Voice Message",
        description="Send an outbound voice message with Vonage",
    )
    def outbound_voice_message(to: PhoneTo, message: MessageText) -> str:
        return tools.outbound_voice_message(ctx, to, message)

    @server.tool(
        name="list-applications",
        title="List my applications",
        description="List out the applications that are attached to my API key",
    )
    def list_applications() -> str:
        return tools.list_applications(ctx)

    @server.tool(
        name="create-application",
        title="Create a new Vonage Application",
        description="Create a new Vonage application with a specified name",
    )
    def create_application(
        name: Annotated[
            str | None,
            Field(
                description=(
                    "The name of the application to create. If not provided, "
                    "a default name will be generated."
                )
            ),
        ] = None,
    ) -> str:
        return tools.create_application(ctx, name)

    @server.tool(
        name="list-purchased-numbers",
        title="List the telephone numbers associated with my Vonage Account",
        description=(
            "List of the telephone numbers that are currently associated with my "
            "account and their metadata"
        ),
    )
    def list_purchased_numbers() -> str:
        return tools.list_purchased_numbers(ctx)

    @server.tool(
        name="link-number-to-vonage-application",
        title="Link an owned number to the assigned Vonage Application",
        description="Link an owned number to the assigned Vonage Application",
    )
    def link_number_to_vonage_application(
        msisdn: Annotated[
            str,
            Field(
                description=(
                    "The phone number to link to the Vonage Application, "
                    "in E.164 format, e.g. +12025550123"
                )
            ),
        ],
        applicationId: Annotated[  # noqa: N803
            str, Field(description="The Vonage Application ID to link the number to")
        ],
    ) -> str:
        return tools.link_number_to_application(ctx, msisdn, applicationId)

    return server


def build_context() -> ToolContext:
    settings = get_settings()
    return ToolContext(settings=settings, gateway=VonageGateway(settings=settings))


def main() -> None:
    load_dotenv()
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        server = create_server(build_context())
        logger.info("server.starting: name=%s version=%s", SERVER_NAME, SERVER_VERSION)
        server.run(transport="stdio")
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("server.start_failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
