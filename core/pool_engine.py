# core/pool_engine.py

from core.accountant import pull_asset, push_asset
from core.errors import InsufficientOutput, ZeroAmount


class PoolEngine:

    @staticmethod
    def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """
        Constant product output, no fee:

            amount_out = reserve_out * amount_in // (reserve_in + amount_in)

        Multiply first, divide last: one floor division, always in the
        pool's favour.
        """
        denominator = reserve_in + amount_in
        if denominator == 0:
            return 0
        return reserve_out * amount_in // denominator

    @staticmethod
    def execute_swap(pool, caller: str, asset_in: str, asset_out: str, amount_in: int) -> tuple:
        """
        Pull, price, book, pay. Inputs are already validated.

        Returns (actual_in, amount_out). Does not roll anything back:
        a failure after the ledger update leaves it to the caller's
        unit of work.
        """
        ledger = pool.ledger

        with pool.receiving():
            actual_in = pull_asset(pool.tokens[asset_in], caller, pool.address, amount_in)
        if actual_in <= 0:
            raise ZeroAmount("Pool received nothing from the input transfer")

        # 🔁 determines swap direction
        reserve_in, reserve_out = ledger.reserves_for(asset_in)

        amount_out = PoolEngine.get_amount_out(actual_in, reserve_in, reserve_out)
        if amount_out <= 0:
            raise InsufficientOutput(
                f"Output truncates to zero for {actual_in} in against reserves "
                f"({reserve_in}, {reserve_out})"
            )

        # ledger first, external call last
        ledger.credit(asset_in, actual_in)
        ledger.debit(asset_out, amount_out)

        push_asset(pool.tokens[asset_out], pool.address, caller, amount_out)

        return actual_in, amount_out
