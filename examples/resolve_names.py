"""
Example: Resolving NNS Names

Demonstrates forward, reverse and batch resolution against the Nexus testnet.
"""

import asyncio
import sys

from dotenv import load_dotenv
load_dotenv()

from nnsresolver import Config, NNSClient


async def main(names: list[str]) -> None:
    """
    Resolution walkthrough:
    1. Check the endpoint serves the configured chain
    2. Resolve each name
    3. Reverse resolve whatever came back
    """
    print("=== NNS Resolution Example ===\n")

    # Reads NNS_RPC_URL, NNS_CHAIN_ID, ... from the environment
    config = Config.from_env()

    async with NNSClient(config) as nns:
        if not await nns.verify_network():
            print(f"⚠️  RPC endpoint is not chain {config.chain_id}")
            return
        print(f"✅ Connected to chain {config.chain_id}")

        encoded = [nns.auto_format(name) for name in names]
        results = await nns.batch_resolve(encoded)

        for original, resolved in zip(encoded, results):
            if resolved is None:
                print(f"   {original:<30} → not found")
                continue
            print(f"   {original:<30} → {resolved.address} ({resolved.source.value})")

            primary = await nns.reverse_resolve_formatted(resolved.address)
            print(f"   {'':<30}   reverse: {primary}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or ["alice.nex", "nex:bob.nex"]))
