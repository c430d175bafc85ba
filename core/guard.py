# core/guard.py

from core.errors import IdenticalAssets, InvalidAsset, ZeroAmount
from core.utils import canonical_id


def require_known_asset(ledger, asset: str) -> str:
    asset = canonical_id(asset)
    if asset not in (ledger.asset_a, ledger.asset_b):
        raise InvalidAsset(f"Asset {asset} is not traded by this pool")
    return asset


def require_distinct_assets(asset_in: str, asset_out: str):
    if canonical_id(asset_in) == canonical_id(asset_out):
        raise IdenticalAssets("Input and output asset must differ")


def require_positive(amount, name="amount") -> int:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"{name} must be an int")
    if amount <= 0:
        raise ZeroAmount(f"{name} must be > 0, got {amount}")
    return amount
