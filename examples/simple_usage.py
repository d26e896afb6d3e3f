#!/usr/bin/env python3
"""
Simple example of using the Soroban client SDK.
"""
import asyncio
import logging
import os

from soroban_client_sdk import ContractClient, NetworkConfig, SorobanClientError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """
    Demonstrate basic usage of the ContractClient.

    This example shows how to:
    1. Build client options for a known network
    2. Generate a client from a deployed contract
    3. Prepare a contract call and serialize it
    """
    # Read configuration from environment
    NETWORK = os.environ.get("NETWORK", "testnet")
    CONTRACT_ID = os.environ.get("CONTRACT_ID")
    PUBLIC_KEY = os.environ.get("PUBLIC_KEY")

    if not CONTRACT_ID:
        print("ERROR: CONTRACT_ID environment variable is required")
        return

    options = NetworkConfig.client_options(NETWORK, contract_id=CONTRACT_ID, public_key=PUBLIC_KEY)

    try:
        client = await ContractClient.from_options(options)
    except SorobanClientError as e:
        print(f"Error loading contract: {str(e)}")
        return

    print(f"Contract {CONTRACT_ID} exposes: {', '.join(sorted(client.names()))}")

    if "hello" in client:
        tx = await client.hello({"to": "world"})
        print(f"Prepared call to {tx.method} with {len(tx.args)} argument(s)")
        print(f"Serialized: {tx.to_json()}")


if __name__ == "__main__":
    asyncio.run(main())
