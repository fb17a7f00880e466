from __future__ import annotations

import argparse
import logging
import os
import pathlib
import sys

import trio

_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _ROOT / "src"
sys.path.insert(0, str(_SRC))

from wallet_signers import (  # noqa: E402
    ConfigurationError,
    LocalWallet,
    WalletConfig,
    recover_message_address,
)


async def _sign(wallet: LocalWallet, message: bytes) -> None:
    sig = await wallet.sign_message(message)

    print("address:", wallet.address)
    print("chain_id:", wallet.chain_id)
    print("tron_hex:", wallet.to_tron_hex_address())
    print("tron_b58:", wallet.to_tron_b58_address())
    print("r:", hex(sig.r))
    print("s:", hex(sig.s))
    print("v:", sig.v)
    print("signature:", sig.to_hex())
    print("recovered:", recover_message_address(message, sig))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Sign an EIP-191 message with a local key and print the wallet's addresses",
    )
    parser.add_argument(
        "--message",
        default=os.getenv("WALLET_MESSAGE", "hello"),
        help="Message to sign (env: WALLET_MESSAGE)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = WalletConfig.from_env()
        wallet = LocalWallet.from_config(config)
    except ConfigurationError as e:
        raise SystemExit(
            f"config error: {e} (set WALLET_PRIVATE_KEY, optionally WALLET_CHAIN_ID)"
        ) from e

    trio.run(_sign, wallet, args.message.encode("utf-8"))


if __name__ == "__main__":
    main()
