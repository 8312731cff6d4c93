"""Command-line entry point.

Usage:
    swapflow 1 0.5
    swapflow 1 0.5 --env-file prod.env --json-logs
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from decimal import Decimal, InvalidOperation

import structlog
from eth_account.signers.local import LocalAccount
from pydantic import ValidationError

from swapflow.chain.client import Web3ChainClient
from swapflow.config import Settings
from swapflow.models.pipeline import PipelineResult
from swapflow.orchestrator import Orchestrator

logger = structlog.get_logger()

EXIT_CONFIG_ERROR = 2


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not amount.is_finite() or amount < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative number: {value!r}")
    return amount


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swapflow",
        description="Approve, swap USDC for LINK on Uniswap V3, then deposit LINK into a "
        "Balancer pool",
    )
    parser.add_argument("swap_amount", type=_amount, help="USDC to swap (e.g. 1)")
    parser.add_argument("liquidity_amount", type=_amount, help="LINK to deposit (e.g. 0.5)")
    parser.add_argument(
        "--env-file",
        default=None,
        help="Read settings from this file instead of .env",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Minimum log level",
    )
    return parser


def configure_logging(json_logs: bool = False, level: str = "INFO") -> None:
    """Configure structlog for console or JSON output."""
    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
    )


async def run_pipeline(
    settings: Settings,
    signer: LocalAccount,
    swap_amount: Decimal,
    liquidity_amount: Decimal,
) -> PipelineResult:
    """Run one pipeline against the configured endpoint."""
    client = Web3ChainClient(
        settings.rpc_url,
        confirmation_timeout=settings.confirmation_timeout,
        poll_interval=settings.poll_interval,
        request_timeout=settings.request_timeout,
    )
    try:
        orchestrator = Orchestrator(settings.pipeline_config(), client, signer)
        return await orchestrator.run(swap_amount, liquidity_amount)
    finally:
        await client.close()


def report(result: PipelineResult) -> None:
    """Print a one-line summary of the run."""
    if result.success:
        print(f"Pipeline completed: {len(result.outcomes)} transactions confirmed")
        return
    stage = result.failed_stage.value if result.failed_stage is not None else "unknown stage"
    print(
        f"Pipeline failed at {stage}: "
        f"{type(result.error).__name__}: {result.error}",
        file=sys.stderr,
    )
    if result.outcomes:
        print(
            "Already confirmed (not reverted): " + ", ".join(result.tx_hashes),
            file=sys.stderr,
        )


def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.json_logs, args.log_level)

    try:
        settings = Settings(_env_file=args.env_file) if args.env_file else Settings()
        signer = settings.signer()
        result = asyncio.run(
            run_pipeline(settings, signer, args.swap_amount, args.liquidity_amount)
        )
    except ValidationError as e:
        logger.error("configuration_invalid", errors=e.errors(include_url=False))
        return EXIT_CONFIG_ERROR
    except ValueError as e:
        logger.error("invalid_input", error=str(e))
        return EXIT_CONFIG_ERROR

    report(result)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
