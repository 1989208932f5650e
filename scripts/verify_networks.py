"""
Verify connectivity to every configured Solana network.
Run: python scripts/verify_networks.py
"""

import asyncio
import sys
from pathlib import Path

# Add app to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.core.exceptions import ExplorerError
from app.services.registry import NetworkRegistry


async def verify_network(registry: NetworkRegistry, network: str) -> bool:
    """Ask one network for its version and current slot."""
    connection = registry.connection_for(network)
    print(f"\n🔍 Testing {network}...")
    print(f"   URL: {connection.endpoint}")
    try:
        version = await connection.get_version()
        slot = await connection.get_slot()
    except ExplorerError as e:
        print(f"   ❌ {network}: {e.message}")
        return False

    print(f"   ✅ Version: {version.get('solana-core', 'unknown')}")
    print(f"   ✅ Current slot: {slot}")
    return True


async def main() -> int:
    settings = get_settings()
    registry = NetworkRegistry.from_settings(settings)
    try:
        results = {
            network: await verify_network(registry, network)
            for network in registry.names
        }
    finally:
        await registry.close()

    print("\n" + "=" * 50)
    for network, ok in results.items():
        print(f"   {'✅' if ok else '❌'} {network}")
    print("=" * 50)
    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
