from __future__ import annotations

import argparse
from collections.abc import Callable

from dotenv import load_dotenv

from . import tools
from .config import get_settings
from .gateway import ToolContext
from .log import configure_logging
from .server import build_context

ToolRunner = Callable[[ToolContext, argparse.Namespace], str]

RUNNERS: dict[str, ToolRunner] = {
    "balance": lambda ctx, a: tools.balance(ctx),
    "sms": lambda ctx, a: tools.send_sms(ctx, a.to, a.message),
    "whatsapp": lambda ctx, a: tools.send_whatsapp(ctx, a.to, a.message),
    "whatsapp-failover": lambda ctx, a: tools.send_whatsapp_with_failover(ctx, a.to, a.message),
    "rcs": lambda ctx, a: tools.send_rcs(ctx, a.to, a.message),
    "rcs-failover": lambda ctx, a: tools.send_rcs_with_failover(ctx, a.to, a.message),
    "voice": lambda ctx, a: tools.outbound_voice_message(ctx, a.to, a.message),
    "list-applications": lambda ctx, a: tools.list_applications(ctx),
    "create-application": lambda ctx, a: tools.create_application(ctx, a.name),
    "list-numbers": lambda ctx, a: tools.list_purchased_numbers(ctx),
    "link-number": lambda ctx, a: tools.link_number_to_application(
        ctx, a.msisdn, a.application_id
    ),
}

# Arguments each tool cannot run without
REQUIRED_ARGS: dict[str, tuple[str, ...]] = {
    "sms": ("to", "message"),
    "whatsapp": ("to", "message"),
    "whatsapp-failover": ("to", "message"),
    "rcs": ("to", "message"),
    "rcs-failover": ("to", "message"),
    "voice": ("to", "message"),
    "link-number": ("msisdn", "application_id"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a single Vonage tool and print its result, without the MCP transport."
    )
    parser.add_argument("tool", choices=sorted(RUNNERS))
    parser.add_argument("--to", default="", help="Destination phone number.")
    parser.add_argument("--message", default="", help="Message text.")
    parser.add_argument("--name", default=None, help="Application name (create-application).")
    parser.add_argument("--msisdn", default="", help="Owned number (link-number).")
    parser.add_argument("--application-id", default="", help="Application ID (link-number).")
    return parser


def run(argv: list[str] | None = None, ctx: ToolContext | None = None) -> str:
    parser = build_parser()
    args = parser.parse_args(argv)

    missing = [
        "--" + name.replace("_", "-")
        for name in REQUIRED_ARGS.get(args.tool, ())
        if not getattr(args, name)
    ]
    if missing:
        parser.error(f"{args.tool} requires {', '.join(missing)}")

    if ctx is None:
        ctx = build_context()
    return RUNNERS[args.tool](ctx, args)


def main() -> None:
    load_dotenv()
    configure_logging(get_settings().log_level)
    print(run())


if __name__ == "__main__":
    main()
