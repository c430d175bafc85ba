# core/pool.py

import threading
from contextlib import contextmanager

from core import guard
from core.errors import InsufficientLiquidity, InvalidAsset, TransferFailed
from core.events import AddLiquidity, EventLog, RemoveLiquidity, Swap
from core.liquidity_engine import LiquidityEngine
from core.pool_engine import PoolEngine
from core.reserves import ReserveLedger, sort_assets
from core.token import PoolShareToken
from core.unit_of_work import UnitOfWork
from core.utils import canonical_id, derive_address


def pool_address(asset_x: str, asset_y: str) -> str:
    asset_a, asset_b = sort_assets(asset_x, asset_y)
    return derive_address(asset_a, asset_b)


class Pool:
    """
    Two-asset constant product pool.

    Every mutating call follows the same order: validate, pull inbound
    assets, update the reserve ledger, then push outbound assets. It runs
    under the pool lock and inside a unit of work, so a failure anywhere
    leaves reserves, shares and token balances exactly as they were.
    Notifications are published once the outermost operation commits.
    """

    def __init__(self, token_x, token_y, share_token=None):
        if token_x is None or token_y is None:
            raise InvalidAsset("Pool assets must be non-null")

        self.ledger = ReserveLedger(token_x.address, token_y.address)
        self.address = pool_address(self.ledger.asset_a, self.ledger.asset_b)

        self.tokens = {
            token_x.address: token_x,
            token_y.address: token_y,
        }
        self.shares = share_token or PoolShareToken(self.address)
        self.events = EventLog(self.address)

        self._lock = threading.RLock()
        # inbound pulls in progress, open atomic scopes, uncommitted notifications
        self._pulling = 0
        self._depth = 0
        self._pending = []

    # --------------------------------------------------
    # READS
    # --------------------------------------------------

    def get_reserves(self) -> tuple:
        return self.ledger.get_reserves()

    def get_asset_a(self) -> str:
        return self.ledger.asset_a

    def get_asset_b(self) -> str:
        return self.ledger.asset_b

    def total_shares(self) -> int:
        return self.shares.total_supply

    def is_empty(self) -> bool:
        return self.shares.total_supply == 0

    def quote(self, asset_in: str, amount_in: int) -> int:
        """Output for a nominal amount_in, ignoring any transfer fee."""
        asset_in = guard.require_known_asset(self.ledger, asset_in)
        guard.require_positive(amount_in, "amount_in")
        reserve_in, reserve_out = self.ledger.reserves_for(asset_in)
        return PoolEngine.get_amount_out(amount_in, reserve_in, reserve_out)

    # --------------------------------------------------
    # OPERATIONS
    # --------------------------------------------------

    def swap(self, caller: str, asset_in: str, asset_out: str, amount_in: int) -> int:
        caller = canonical_id(caller)

        with self._lock:
            self._require_not_pulling()
            asset_in = guard.require_known_asset(self.ledger, asset_in)
            asset_out = guard.require_known_asset(self.ledger, asset_out)
            guard.require_distinct_assets(asset_in, asset_out)
            guard.require_positive(amount_in, "amount_in")

            with self._atomic("swap"):
                actual_in, amount_out = PoolEngine.execute_swap(
                    self, caller, asset_in, asset_out, amount_in
                )

            self._commit(Swap(caller, asset_in, asset_out, actual_in, amount_out))

        return amount_out

    def add_liquidity(self, caller: str, amount_a_desired: int, amount_b_desired: int) -> tuple:
        caller = canonical_id(caller)

        with self._lock:
            self._require_not_pulling()
            guard.require_positive(amount_a_desired, "amount_a_desired")
            guard.require_positive(amount_b_desired, "amount_b_desired")

            with self._atomic("add_liquidity"):
                actual_a, actual_b, minted = LiquidityEngine.execute_add(
                    self, caller, amount_a_desired, amount_b_desired
                )

            self._commit(AddLiquidity(caller, actual_a, actual_b, minted))

        return actual_a, actual_b, minted

    def remove_liquidity(self, caller: str, shares: int) -> tuple:
        caller = canonical_id(caller)

        if not isinstance(shares, int) or isinstance(shares, bool):
            raise TypeError("shares must be an int")

        with self._lock:
            self._require_not_pulling()
            if shares <= 0:
                raise InsufficientLiquidity(f"shares must be > 0, got {shares}")

            with self._atomic("remove_liquidity"):
                amount_a, amount_b = LiquidityEngine.execute_remove(self, caller, shares)

            self._commit(RemoveLiquidity(caller, amount_a, amount_b, shares))

        return amount_a, amount_b

    # --------------------------------------------------

    @contextmanager
    def receiving(self):
        """
        Marks an inbound pull. The balance diff of a pull is only exact if
        nothing else moves the pool's balance meanwhile, so every pool
        operation entered from a transfer hook during the pull is refused.
        """
        self._pulling += 1
        try:
            yield
        finally:
            self._pulling -= 1

    def _require_not_pulling(self):
        if self._pulling:
            raise TransferFailed("Pool is receiving an inbound transfer")

    @contextmanager
    def _atomic(self, name):
        # notifications of nested operations wait for the outermost commit
        mark = len(self._pending)
        self._depth += 1
        try:
            with UnitOfWork([self.ledger, self.shares, *self.tokens.values()], name=name):
                yield
        except BaseException:
            del self._pending[mark:]
            raise
        finally:
            self._depth -= 1

    def _commit(self, event):
        self._pending.append(event)
        if self._depth:
            return

        pending, self._pending = self._pending, []
        for committed in pending:
            self.events.publish(committed)

    def summary(self) -> dict:
        return {
            "id": f"{self.ledger.asset_a}-{self.ledger.asset_b}",
            "address": self.address,
            "asset_a": self.ledger.asset_a,
            "asset_b": self.ledger.asset_b,
            "reserve_a": self.ledger.reserve_a,
            "reserve_b": self.ledger.reserve_b,
            "total_shares": self.shares.total_supply,
            "share_token": self.shares.address,
        }

    def to_dict(self):
        return {
            "address": self.address,
            "share_token": self.shares.address,
            **self.ledger.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict, tokens: dict):
        pool = cls(
            tokens[data["asset_a"]],
            tokens[data["asset_b"]],
            share_token=tokens[data["share_token"]],
        )
        if pool.address != data["address"]:
            raise ValueError("Pool address does not match its assets")

        pool.ledger.reserve_a = int(data["reserve_a"])
        pool.ledger.reserve_b = int(data["reserve_b"])
        return pool

    def __repr__(self):
        return f"Pool({self.ledger!r}, shares={self.shares.total_supply})"
