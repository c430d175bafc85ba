# core/genesis.py
import json
from pathlib import Path

from core.registry import PoolRegistry


def load_genesis(path) -> dict | None:
    path = Path(path)
    if not path.exists():
        return None
    with path.open() as f:
        return json.load(f)


def generate(genesis: dict) -> PoolRegistry:
    """
    Builds a fresh registry: tokens, initial allocations, empty pools.
    """
    print("Creating GENESIS state")

    registry = PoolRegistry()

    for entry in genesis.get("tokens", []):
        registry.register_token(
            entry["address"],
            entry.get("symbol"),
            fee_bps=int(entry.get("fee_bps", 0)),
        )

    for alloc in genesis.get("allocations", []):
        token = registry.get_token(alloc["asset"])
        token.mint(alloc["to"], int(alloc["amount"]))

    for asset_x, asset_y in genesis.get("pools", []):
        pool = registry.create_pool(asset_x, asset_y)
        print(f"🏊 Pool {pool.get_asset_a()}-{pool.get_asset_b()} at {pool.address}")

    return registry
