# core/reserves.py

from core.errors import IdenticalAssets, InvalidAsset
from core.utils import asset_sort_key, canonical_id


def sort_assets(asset_x: str, asset_y: str) -> tuple:
    """
    Returns (asset_a, asset_b) in canonical order, lower identity first.
    """
    if not asset_x or not asset_y:
        raise InvalidAsset("Pool assets must be non-null")

    asset_x = canonical_id(asset_x)
    asset_y = canonical_id(asset_y)

    if asset_x == asset_y:
        raise IdenticalAssets("Pool assets must differ")

    return tuple(sorted((asset_x, asset_y), key=asset_sort_key))


class ReserveLedger:
    """
    The pool's believed holdings of each asset.

    Pricing reads these numbers only. They move by exactly the amounts
    accounted for by an operation and are never refreshed from a live
    balance query, so tokens sent to the pool outside an operation do
    not change the price.
    """

    def __init__(self, asset_x: str, asset_y: str, reserve_a: int = 0, reserve_b: int = 0):
        self.asset_a, self.asset_b = sort_assets(asset_x, asset_y)
        self.reserve_a = reserve_a
        self.reserve_b = reserve_b

    def get_reserves(self) -> tuple:
        return self.reserve_a, self.reserve_b

    def reserves_for(self, asset_in: str) -> tuple:
        """(reserve_in, reserve_out) seen from the side receiving asset_in."""
        asset_in = canonical_id(asset_in)
        if asset_in == self.asset_a:
            return self.reserve_a, self.reserve_b
        if asset_in == self.asset_b:
            return self.reserve_b, self.reserve_a
        raise InvalidAsset(f"Asset {asset_in} is not traded by this pool")

    def other(self, asset: str) -> str:
        asset = canonical_id(asset)
        if asset == self.asset_a:
            return self.asset_b
        if asset == self.asset_b:
            return self.asset_a
        raise InvalidAsset(f"Asset {asset} is not traded by this pool")

    def credit(self, asset: str, amount: int):
        self._adjust(asset, amount)

    def debit(self, asset: str, amount: int):
        self._adjust(asset, -amount)

    def _adjust(self, asset, delta):
        asset = canonical_id(asset)
        if asset == self.asset_a:
            key = "reserve_a"
        elif asset == self.asset_b:
            key = "reserve_b"
        else:
            raise InvalidAsset(f"Asset {asset} is not traded by this pool")

        value = getattr(self, key) + delta
        if value < 0:
            raise ValueError(f"Reserve underflow on {asset}: {value}")
        setattr(self, key, value)

    def to_dict(self):
        return {
            "asset_a": self.asset_a,
            "asset_b": self.asset_b,
            "reserve_a": self.reserve_a,
            "reserve_b": self.reserve_b,
        }

    def __repr__(self):
        return (
            f"ReserveLedger({self.asset_a}={self.reserve_a}, "
            f"{self.asset_b}={self.reserve_b})"
        )
