# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from rewardrecon.app import (
    confirm_reward_claim,
    list_pending_claims,
    reconcile_once,
    run_reconciliation_service,
    set_claim_token,
    show_claim,
    submit_reward_claim,
)
from rewardrecon.config import ConfigurationError, configure_logging, get_reconciliation_config
from rewardrecon.domain.errors import ClaimValidationError, DuplicateClaimError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rewardrecon.config import ReconciliationConfig
    from rewardrecon.domain.model import Claim

log = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_VALIDATION = 2
EXIT_CONFLICT = 3


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rewardrecon",
        description="Submit reward claims and reconcile them against the verification oracle",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    submit = subparsers.add_parser("submit", help="Submit a new reward claim")
    submit.add_argument("--subject", type=str, required=True, help="Subject owed the reward")
    submit.add_argument("--kind", type=str, required=True, help="Kind of reward claimed")
    submit.add_argument(
        "--token",
        type=str,
        help="Verification token (e.g. transaction hash); may be supplied later",
    )

    show = subparsers.add_parser("show", help="Show a single claim")
    show.add_argument("claim_id", type=str, help="Claim id")

    subparsers.add_parser("pending", help="List unconfirmed claims")

    set_token = subparsers.add_parser("set-token", help="Set the verification token of a claim")
    set_token.add_argument("claim_id", type=str, help="Claim id")
    set_token.add_argument("token", type=str, help="Verification token")

    confirm = subparsers.add_parser("confirm", help="Confirm a claim without asking the oracle")
    confirm.add_argument("claim_id", type=str, help="Claim id")

    reconcile = subparsers.add_parser("reconcile", help="Reconcile unconfirmed claims")
    reconcile.add_argument(
        "--once",
        action="store_true",
        help="Run a single scan and exit instead of running until interrupted",
    )
    reconcile.add_argument(
        "--interval-ms",
        type=int,
        help="Milliseconds between scans (defaults to config)",
    )
    reconcile.add_argument(
        "--concurrency",
        type=int,
        help="Maximum oracle calls in flight (defaults to config)",
    )
    reconcile.add_argument(
        "--timeout-ms",
        type=int,
        help="Per-call oracle timeout in milliseconds (defaults to config)",
    )
    reconcile.add_argument(
        "--drain-timeout",
        type=float,
        help="Seconds to wait for in-flight checks on shutdown before cancelling them",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid claim id: {value}") from exc


def _reconciliation_config(args: argparse.Namespace) -> ReconciliationConfig:
    if args.drain_timeout is not None and args.drain_timeout < 0:
        raise ValueError("Drain timeout must be non-negative")
    return get_reconciliation_config(
        scan_interval_ms=args.interval_ms,
        concurrency_limit=args.concurrency,
        per_call_timeout_ms=args.timeout_ms,
    )


def _format_claim(claim: Claim) -> str:
    token = claim.verification_token or "-"
    return (
        f"{claim.id}  {claim.status.value:<11}  retries={claim.retry_count:<3}  "
        f"subject={claim.subject_id}  kind={claim.claim_kind}  token={token}"
    )


def _dispatch(args: argparse.Namespace, config: ReconciliationConfig | None) -> None:
    if args.command == "submit":
        claim = submit_reward_claim(
            subject_id=args.subject,
            claim_kind=args.kind,
            verification_token=args.token,
        )
        print(claim.id)
    elif args.command == "show":
        print(_format_claim(show_claim(_parse_uuid(args.claim_id))))
    elif args.command == "pending":
        claims = list_pending_claims()
        for claim in claims:
            print(_format_claim(claim))
        log.info("%s unconfirmed claims", len(claims))
    elif args.command == "set-token":
        claim = set_claim_token(_parse_uuid(args.claim_id), args.token)
        print(_format_claim(claim))
    elif args.command == "confirm":
        if not confirm_reward_claim(_parse_uuid(args.claim_id)):
            log.info("Nothing to do: claim %s was already confirmed", args.claim_id)
    elif args.command == "reconcile":
        if args.once:
            result = reconcile_once(config=config)
            log.info(
                "Reconciliation finished: scanned=%s, confirmed=%s, pending=%s, errors=%s",
                result.scanned,
                result.confirmed,
                result.pending,
                result.errors,
            )
        else:
            run_reconciliation_service(config=config, drain_timeout=args.drain_timeout)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    config: ReconciliationConfig | None = None
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "reconcile":
            config = _reconciliation_config(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(EXIT_VALIDATION)

    try:
        _dispatch(parsed_args, config)
    except (ClaimValidationError, ValueError):
        log.exception("Invalid request")
        sys.exit(EXIT_VALIDATION)
    except DuplicateClaimError:
        log.exception("Conflicting claim")
        sys.exit(EXIT_CONFLICT)
    except Exception:
        log.exception("Fatal error")
        sys.exit(EXIT_FAILURE)


def run() -> None:
    """Console script entry point: load ``.env`` and run the CLI."""
    load_dotenv()
    main()


if __name__ == "__main__":
    run()
