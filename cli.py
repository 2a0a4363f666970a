#!/usr/bin/env python3
"""Operator CLI for the registration relayer"""

import argparse
import asyncio
import sys

from app.config import settings
from app.core.execution import ConfigurationError, ControlledAccount, EthRpcClient, RelayerError
from app.core.registration import pack_timestamp, unpack_timestamp


async def cli_nonce() -> int:
    """Print the relay account and its on-chain nonce"""
    if not settings.has_rpc_url or not settings.has_private_key:
        raise ConfigurationError("rpc_url and private_key must be configured")

    client = EthRpcClient(settings.rpc_url, timeout=settings.rpc_timeout_seconds)
    try:
        chain_id = settings.chain_id or await client.chain_id()
        account = ControlledAccount.from_private_key(
            settings.private_key.get_secret_value(), chain_id=chain_id
        )
        nonce = await client.get_transaction_count(account.address, settings.nonce_block_tag)
    finally:
        await client.close()

    print(f"Address:  {account.address}")
    print(f"Chain ID: {chain_id}")
    print(f"Nonce:    {nonce} ({settings.nonce_block_tag})")
    return 0


def cli_pack_timestamp(timestamp: int) -> int:
    packed = pack_timestamp(timestamp)
    print(f"{packed} (0x{packed:06x}) -> {unpack_timestamp(packed).isoformat()}")
    return 0


def cli_run() -> int:
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Registration relayer CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Run the relay HTTP service")
    subparsers.add_parser("nonce", help="Show the relay account and its on-chain nonce")

    pack_parser = subparsers.add_parser("pack-timestamp", help="Pack a Unix timestamp the way register() expects")
    pack_parser.add_argument("timestamp", type=int, help="Unix timestamp in seconds")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "run":
            return cli_run()
        if args.command == "nonce":
            return asyncio.run(cli_nonce())
        if args.command == "pack-timestamp":
            return cli_pack_timestamp(args.timestamp)
    except RelayerError as exc:
        print(f"❌ {exc.message}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
