#!/usr/bin/env python3
"""
Manage a treasury and its HD-derived child wallets.

Usage:
    python -m wallet_keeper --init-dist      # send FUNDING_THRESHOLD to every child wallet
    python -m wallet_keeper --cont-fund      # every POLL_INTERVAL seconds, top up wallets below the threshold
    python -m wallet_keeper --reclaim        # sweep RECLAIM_PERCENT of each child balance back to the treasury
    python -m wallet_keeper --status         # print balances only

Environment (or --env-file): MNEMONIC, RPC_URL, ASSET_ID and the optional
settings documented in wallet_keeper.config.settings.
"""
from __future__ import annotations

import argparse
import logging
import sys

from wallet_keeper.commands import (
    continual_funding,
    initial_distribution,
    reclaim,
    resolve_mode,
    wallet_status,
)
from wallet_keeper.config.logging_config import setup_logger, setup_transfer_logger
from wallet_keeper.config.settings import KeeperConfig
from wallet_keeper.errors import KeeperError
from wallet_keeper.ledger import BalanceOracle, LedgerClient, TransferExecutor
from wallet_keeper.wallets import treasury_account

logger = logging.getLogger("wallet_keeper.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wallet-keeper",
        description="Fund, monitor and reclaim HD wallets derived from one mnemonic",
    )

    # Modes (mutually exclusive; checked before connecting)
    parser.add_argument("--init-dist", dest="init_dist", action="store_true", help="Send the funding threshold to every child wallet")
    parser.add_argument("--cont-fund", dest="cont_fund", action="store_true", help="Poll wallets forever and fund any below the threshold")
    parser.add_argument("--reclaim", action="store_true", help="Sweep the reclaim percentage of each child balance back to the treasury")
    parser.add_argument("--status", action="store_true", help="Show treasury and child balances without sending anything")

    parser.add_argument("--env-file", help="Path to .env file to load before resolving env vars")
    parser.add_argument("--rpc-url", dest="rpc_url", help="JSON-RPC endpoint (default RPC_URL/PROVIDER)")
    parser.add_argument("--asset-id", dest="asset_id", help="Asset address; 0x000...0 for the native coin (default ASSET_ID)")
    parser.add_argument("--wallet-count", dest="wallet_count", type=int, help="Number of child wallets (default WALLET_COUNT or 10)")
    parser.add_argument("--threshold", dest="funding_threshold", type=int, help="Minimum child balance in base units (default 5,000,000)")
    parser.add_argument("--reclaim-percent", dest="reclaim_percent", help="Percentage of each balance to reclaim (default 99.9)")
    parser.add_argument("--interval", dest="poll_interval", type=float, help="Seconds between continual funding passes (default 20)")
    parser.add_argument("--chain-id", dest="chain_id", type=int, help="Abort unless the endpoint serves this chain id")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def _run_mode(mode: str, config: KeeperConfig, client: LedgerClient) -> None:
    treasury = treasury_account(config.mnemonic, config.treasury_path)
    logger.info("Treasury address: %s (%s)", treasury.address, config.treasury_path)
    logger.info("Using AssetId: %s%s", config.asset_id, " (native)" if config.native_asset else "")

    oracle = BalanceOracle(client)
    executor = TransferExecutor(client, oracle)

    if mode == "init_dist":
        logger.info("Starting initial distribution...")
        initial_distribution(config, treasury, executor)
    elif mode == "cont_fund":
        logger.info("Starting continual funding...")
        continual_funding(config, treasury, oracle, executor)
    elif mode == "reclaim":
        logger.info("Starting reclaim...")
        reclaim(config, treasury, oracle, executor)
    elif mode == "status":
        wallet_status(config, treasury, oracle)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logger("wallet_keeper", level=logging.DEBUG if args.verbose else logging.INFO, detailed=args.verbose)
    setup_transfer_logger()

    try:
        mode = resolve_mode(
            init_dist=args.init_dist,
            cont_fund=args.cont_fund,
            reclaim=args.reclaim,
            status=args.status,
        )
        if mode is None:
            parser.print_help()
            print("\nNo valid command provided. Use --init-dist, --cont-fund, --reclaim or --status.", file=sys.stderr)
            return 2

        config = KeeperConfig.from_env(
            args.env_file,
            rpc_url=args.rpc_url,
            asset_id=args.asset_id,
            wallet_count=args.wallet_count,
            funding_threshold=args.funding_threshold,
            reclaim_percent=args.reclaim_percent,
            poll_interval=args.poll_interval,
            chain_id=args.chain_id,
        )
        client = LedgerClient.connect(config.rpc_url, config.chain_id, receipt_timeout=config.receipt_timeout)
        _run_mode(mode, config, client)
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping.")
        return 130
    except KeeperError as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
