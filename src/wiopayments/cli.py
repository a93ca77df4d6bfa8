"""
Command-line interface for exercising the WioPayments API.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence, Tuple

from .api import ConfigError, PaymentClient, create_payment_client, load_config
from .core.environment import ENV_PREFIX
from .core.exceptions import WioPaymentsError


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _setting(value: str) -> Tuple[str, str]:
    """Parse a ``--set`` value; ``api_key=...`` is short for ``WIOPAYMENTS_API_KEY=...``."""
    key, sep, val = value.partition("=")
    key = key.strip().upper()
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Expected SETTING=VALUE, got {value!r}")
    if not key.startswith(ENV_PREFIX):
        key = ENV_PREFIX + key
    return key, val


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wiopayments",
        description="Talk to the WioPayments gateway from the command line",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing WIOPAYMENTS_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_setting,
        metavar="SETTING=VALUE",
        default=None,
        help="Override a WIOPAYMENTS_* setting; the prefix may be omitted (repeatable)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser(
        "verify-credentials",
        help="Check the configured API key and secret against the gateway",
    )
    commands.add_parser("account", help="Print the account information")
    commands.add_parser("balance", help="Print the account balance")

    payment = commands.add_parser("payment", help="Print a single payment")
    payment.add_argument("payment_id", help="Gateway payment identifier")

    webhook = commands.add_parser(
        "verify-webhook",
        help="Verify a webhook signature against a saved request body",
    )
    webhook.add_argument(
        "--payload-file",
        required=True,
        help="File holding the raw webhook request body",
    )
    webhook.add_argument("--signature", required=True, help="Signature header value")
    webhook.add_argument("--timestamp", help="Timestamp header value (unix seconds)")
    return parser


def _run_command(client: PaymentClient, args: argparse.Namespace) -> int:
    if args.command == "verify-credentials":
        result = client.validate_api_credentials()
        if not result["valid"]:
            logging.error("Credentials rejected: %s", result["error"])
            return 1
        logging.info("Credentials accepted")
        _print_json(result["account_info"])
        return 0

    if args.command == "account":
        _print_json(client.get_account_info())
        return 0

    if args.command == "balance":
        _print_json(client.get_balance())
        return 0

    if args.command == "payment":
        _print_json(client.get_payment(args.payment_id).to_dict())
        return 0

    payload = Path(args.payload_file).read_text(encoding="utf-8")
    if not client.verify_webhook_signature(payload, args.signature, args.timestamp):
        logging.error("Webhook signature is not valid")
        return 1
    logging.info("Webhook signature is valid")
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)
    overrides = dict(args.set or ())

    try:
        config = load_config(env_file=args.env_file, overrides=overrides)
        client = create_payment_client(config=config)
    except (ConfigError, WioPaymentsError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    try:
        return _run_command(client, args)
    except (WioPaymentsError, OSError) as exc:
        logging.error("%s failed: %s", args.command, exc)
        return 1


def main() -> None:
    sys.exit(run_cli())
