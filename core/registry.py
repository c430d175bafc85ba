# core/registry.py

import threading

from core.errors import InvalidAsset
from core.pool import Pool
from core.reserves import sort_assets
from core.token import FeeOnTransferToken, Token
from core.utils import canonical_id


class PoolRegistry:
    """
    Tokens and pools known to a node. Pools are keyed by their canonical
    (asset_a, asset_b) pair; each pool keeps its own lock.
    """

    def __init__(self):
        self.tokens = {}
        self.pools = {}
        self._lock = threading.Lock()

    # --------------------------------------------------
    # TOKENS
    # --------------------------------------------------

    def register_token(self, address: str, symbol: str | None = None, fee_bps: int = 0) -> Token:
        address = canonical_id(address)

        with self._lock:
            if address in self.tokens:
                raise ValueError(f"Token already registered: {address}")

            if fee_bps:
                token = FeeOnTransferToken(address, symbol, fee_bps)
            else:
                token = Token(address, symbol)

            self.tokens[address] = token
            return token

    def get_token(self, address: str) -> Token:
        token = self.tokens.get(canonical_id(address))
        if token is None:
            raise InvalidAsset(f"Unknown token: {address}")
        return token

    # --------------------------------------------------
    # POOLS
    # --------------------------------------------------

    def create_pool(self, asset_x: str, asset_y: str) -> Pool:
        key = sort_assets(asset_x, asset_y)
        token_x = self.get_token(asset_x)
        token_y = self.get_token(asset_y)

        with self._lock:
            if key in self.pools:
                raise ValueError(f"Pool already exists: {key[0]}-{key[1]}")

            pool = Pool(token_x, token_y)
            self.pools[key] = pool
            self.tokens[pool.shares.address] = pool.shares
            return pool

    def get_pool(self, asset_x: str, asset_y: str) -> Pool:
        pool = self.pools.get(sort_assets(asset_x, asset_y))
        if pool is None:
            raise InvalidAsset(f"Pool not found: {asset_x}-{asset_y}")
        return pool

    def find_pool(self, address: str) -> Pool | None:
        address = canonical_id(address)
        return next((p for p in self.pools.values() if p.address == address), None)

    def all_pools(self) -> list:
        return [self.pools[key] for key in sorted(self.pools)]

    # --------------------------------------------------

    def to_dict(self):
        return {
            "tokens": [self.tokens[a].to_dict() for a in sorted(self.tokens)],
            "pools": [pool.to_dict() for pool in self.all_pools()],
        }

    @classmethod
    def from_dict(cls, data: dict):
        registry = cls()

        for raw in data.get("tokens", []):
            token = Token.from_dict(raw)
            registry.tokens[token.address] = token

        for raw in data.get("pools", []):
            pool = Pool.from_dict(raw, registry.tokens)
            registry.pools[(pool.get_asset_a(), pool.get_asset_b())] = pool

        return registry
