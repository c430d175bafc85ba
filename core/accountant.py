# core/accountant.py

from core.errors import TransferFailed


def _call_transfer(fn, *args):
    try:
        ok = fn(*args)
    except TransferFailed:
        raise
    except Exception as e:
        raise TransferFailed(f"Transfer aborted: {e}") from e

    if not ok:
        raise TransferFailed("Transfer rejected")


def pull_asset(token, sender: str, pool_address: str, requested: int) -> int:
    """
    Pull `requested` units of `token` from `sender` into the pool and
    return what the pool actually received, measured as the difference
    of its own balance before and after the transfer.
    """
    before = token.balance_of(pool_address)
    _call_transfer(token.transfer_from, pool_address, sender, pool_address, requested)
    after = token.balance_of(pool_address)
    return after - before


def push_asset(token, pool_address: str, to: str, amount: int):
    _call_transfer(token.transfer, pool_address, to, amount)
