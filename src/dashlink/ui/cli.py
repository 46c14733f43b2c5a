from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from dashlink.adapters.wallet import WithdrawalForm
from dashlink.app import build_executor, send_request, withdraw
from dashlink.config import ConfigurationError, configure_logging
from dashlink.domain.errors import ErrorKind
from dashlink.domain.mutations import Completed
from dashlink.domain.outcome import Failure, Success

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Talk to the dashboard API")
    parser.add_argument("--verbose", action="store_true", help="Log request details")
    subparsers = parser.add_subparsers(dest="command", required=True)

    request = subparsers.add_parser("request", help="Send one request and print the outcome")
    request.add_argument("method", type=str, help="HTTP method, e.g. GET or POST")
    request.add_argument("path", type=str, help="Path below the API base URL, e.g. /users/me")
    request.add_argument(
        "--json",
        dest="json_body",
        type=str,
        help="JSON document to send as the request body",
    )

    withdraw_cmd = subparsers.add_parser("withdraw", help="Request a wallet withdrawal")
    withdraw_cmd.add_argument("--amount", type=float, required=True, help="Amount to withdraw")
    withdraw_cmd.add_argument("--bank-name", type=str, required=True, help="Bank short name")
    withdraw_cmd.add_argument(
        "--account-number",
        type=str,
        required=True,
        help="Destination bank account number",
    )
    withdraw_cmd.add_argument(
        "--holder-name",
        type=str,
        required=True,
        help="Name of the account holder",
    )
    withdraw_cmd.add_argument(
        "--deadline",
        type=float,
        help="Seconds to spend verifying an ambiguous answer before giving up",
    )

    subparsers.add_parser("logout", help="Forget the stored session")

    return parser.parse_args(list(argv))


def _parse_json_body(value: str | None) -> object | None:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON body: {exc}") from exc


def _to_jsonable(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: _to_jsonable(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    return value


def _emit(value: object) -> None:
    print(json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False))  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        body = _parse_json_body(getattr(parsed_args, "json_body", None))
        executor = build_executor()
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.command == "logout":
        executor.logout()
        log.info("Session cleared")
        return

    if parsed_args.command == "request":
        outcome = asyncio.run(
            send_request(executor, parsed_args.method, parsed_args.path, payload=body)
        )
        _emit(outcome)
        if isinstance(outcome, Failure) and outcome.kind is ErrorKind.AUTH_EXPIRED:
            log.warning("Session expired; log in again")
        if not isinstance(outcome, Success):
            sys.exit(1)
        return

    form = WithdrawalForm(
        amount=parsed_args.amount,
        bank_name=parsed_args.bank_name,
        bank_account_number=parsed_args.account_number,
        bank_holder_name=parsed_args.holder_name,
    )
    resolution = asyncio.run(withdraw(executor, form, deadline=parsed_args.deadline))
    _emit(resolution)
    if not isinstance(resolution, Completed):
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
