# core/liquidity_engine.py

import math

from core.accountant import pull_asset, push_asset
from core.errors import InsufficientLiquidity, TransferFailed


class LiquidityEngine:
    """
    Share accounting for deposits and withdrawals.

    Every division is a floor division on the product, and every rounding
    goes against the depositor / withdrawer so existing holders are never
    diluted.
    """

    @staticmethod
    def bootstrap_shares(amount_a: int, amount_b: int) -> int:
        """First deposit: floor(sqrt(amount_a * amount_b))."""
        return math.isqrt(amount_a * amount_b)

    @staticmethod
    def proportional_amounts(
        amount_a_desired: int,
        amount_b_desired: int,
        reserve_a: int,
        reserve_b: int,
    ) -> tuple:
        """
        Amounts that keep the current reserve ratio, capped at the desired
        amounts. Each side is capped independently.
        """
        cap_a = min(amount_a_desired, amount_b_desired * reserve_a // reserve_b)
        cap_b = min(amount_b_desired, amount_a_desired * reserve_b // reserve_a)
        return cap_a, cap_b

    @staticmethod
    def proportional_shares(
        actual_a: int,
        actual_b: int,
        reserve_a: int,
        reserve_b: int,
        total_shares: int,
    ) -> int:
        # min of two independently floored estimates; may under-mint slightly
        return min(
            actual_a * total_shares // reserve_a,
            actual_b * total_shares // reserve_b,
        )

    @staticmethod
    def withdrawal_amounts(shares: int, reserve_a: int, reserve_b: int, total_shares: int) -> tuple:
        return (
            shares * reserve_a // total_shares,
            shares * reserve_b // total_shares,
        )

    # --------------------------------------------------
    # EXECUTION
    # --------------------------------------------------

    @staticmethod
    def execute_add(pool, caller: str, amount_a_desired: int, amount_b_desired: int) -> tuple:
        ledger = pool.ledger
        total_shares = pool.shares.total_supply
        token_a = pool.tokens[ledger.asset_a]
        token_b = pool.tokens[ledger.asset_b]

        if total_shares == 0:
            pull_a, pull_b = amount_a_desired, amount_b_desired
        else:
            pull_a, pull_b = LiquidityEngine.proportional_amounts(
                amount_a_desired, amount_b_desired, ledger.reserve_a, ledger.reserve_b
            )

        with pool.receiving():
            actual_a = pull_asset(token_a, caller, pool.address, pull_a)
            actual_b = pull_asset(token_b, caller, pool.address, pull_b)

        if total_shares == 0:
            minted = LiquidityEngine.bootstrap_shares(actual_a, actual_b)
        else:
            minted = LiquidityEngine.proportional_shares(
                actual_a, actual_b, ledger.reserve_a, ledger.reserve_b, total_shares
            )

        if minted <= 0:
            raise InsufficientLiquidity(
                f"Deposit of ({actual_a}, {actual_b}) mints no shares"
            )

        ledger.credit(ledger.asset_a, actual_a)
        ledger.credit(ledger.asset_b, actual_b)

        pool.shares.mint(caller, minted)

        return actual_a, actual_b, minted

    @staticmethod
    def execute_remove(pool, caller: str, shares: int) -> tuple:
        ledger = pool.ledger
        total_shares = pool.shares.total_supply

        # the share transfer below would be rejected; fail before booking anything
        if pool.shares.balance_of(caller) < shares:
            raise TransferFailed(f"Caller does not hold {shares} shares")

        amount_a, amount_b = LiquidityEngine.withdrawal_amounts(
            shares, ledger.reserve_a, ledger.reserve_b, total_shares
        )

        ledger.debit(ledger.asset_a, amount_a)
        ledger.debit(ledger.asset_b, amount_b)

        # shares into pool custody, then destroyed
        if not pool.shares.transfer(caller, pool.address, shares):
            raise TransferFailed(f"Caller does not hold {shares} shares")
        pool.shares.burn(pool.address, shares)

        push_asset(pool.tokens[ledger.asset_a], pool.address, caller, amount_a)
        push_asset(pool.tokens[ledger.asset_b], pool.address, caller, amount_b)

        return amount_a, amount_b
