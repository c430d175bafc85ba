# core/token.py

from core.utils import canonical_id

FEE_DENOMINATOR = 10_000


def k(owner, spender):
    return f"{owner}:{spender}"


class Token:
    """
    In-memory transferable asset with ERC20 semantics.

    transfer / transfer_from return False instead of raising when the
    balance or allowance is insufficient. Transfer hooks are called after
    every balance move with (token, frm, to, amount) and may call back
    into the pool that triggered the move.
    """

    kind = "token"

    # not part of a unit-of-work snapshot
    _uow_skip = ("transfer_hooks",)

    def __init__(self, address: str, symbol: str | None = None):
        if not address:
            raise ValueError("Token address is required")

        self.address = canonical_id(address)
        self.symbol = symbol or self.address
        self.balances = {}
        self.allowances = {}
        self.total_supply = 0
        self.transfer_hooks = []

    # --------------------------------------------------
    # READS
    # --------------------------------------------------

    def balance_of(self, holder: str) -> int:
        return self.balances.get(canonical_id(holder), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get(k(canonical_id(owner), canonical_id(spender)), 0)

    # --------------------------------------------------
    # WRITES
    # --------------------------------------------------

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0:
            return False
        self.allowances[k(canonical_id(owner), canonical_id(spender))] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        sender = canonical_id(sender)
        to = canonical_id(to)

        if amount < 0 or not to:
            return False
        if self.balance_of(sender) < amount:
            return False

        self._move(sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        spender = canonical_id(spender)
        owner = canonical_id(owner)
        to = canonical_id(to)

        if amount < 0 or not to:
            return False

        allowed = self.allowance(owner, spender)
        if allowed < amount or self.balance_of(owner) < amount:
            return False

        self.allowances[k(owner, spender)] = allowed - amount
        self._move(owner, to, amount)
        return True

    def mint(self, to: str, amount: int):
        if amount < 0:
            raise ValueError("Invalid mint amount")
        to = canonical_id(to)
        self.balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def burn(self, holder: str, amount: int):
        holder = canonical_id(holder)
        if amount < 0 or self.balance_of(holder) < amount:
            raise ValueError("Insufficient balance to burn")
        self._set_balance(holder, self.balance_of(holder) - amount)
        self.total_supply -= amount

    # --------------------------------------------------

    def _set_balance(self, holder, amount):
        if amount == 0:
            self.balances.pop(holder, None)
        else:
            self.balances[holder] = amount

    def _move(self, frm, to, amount):
        self._set_balance(frm, self.balance_of(frm) - amount)
        self._set_balance(to, self.balance_of(to) + amount)
        self._after_move(frm, to, amount)

    def _after_move(self, frm, to, amount):
        for hook in list(self.transfer_hooks):
            hook(self, frm, to, amount)

    def to_dict(self):
        return {
            "kind": self.kind,
            "address": self.address,
            "symbol": self.symbol,
            "balances": dict(self.balances),
            "allowances": dict(self.allowances),
            "total_supply": self.total_supply,
        }

    @classmethod
    def from_dict(cls, data: dict):
        kind = data.get("kind", "token")
        if kind == FeeOnTransferToken.kind:
            obj = FeeOnTransferToken(data["address"], data.get("symbol"), data.get("fee_bps", 0))
        elif kind == PoolShareToken.kind:
            obj = PoolShareToken(data["address"], data.get("symbol"))
        elif kind == Token.kind:
            obj = Token(data["address"], data.get("symbol"))
        else:
            raise ValueError(f"Unknown token kind: {kind}")

        obj.balances = {h: int(v) for h, v in data.get("balances", {}).items()}
        obj.allowances = {key: int(v) for key, v in data.get("allowances", {}).items()}
        obj.total_supply = int(data.get("total_supply", 0))
        return obj

    def __repr__(self):
        return f"{type(self).__name__}({self.symbol}, supply={self.total_supply})"


class FeeOnTransferToken(Token):
    """
    Burns fee_bps / 10_000 of every transfer, so the recipient
    receives less than the nominal amount.
    """

    kind = "fee_on_transfer"

    def __init__(self, address: str, symbol: str | None = None, fee_bps: int = 0):
        super().__init__(address, symbol)
        if not (0 <= fee_bps <= FEE_DENOMINATOR):
            raise ValueError(f"fee_bps must be in [0, {FEE_DENOMINATOR}]: {fee_bps}")
        self.fee_bps = fee_bps

    def _move(self, frm, to, amount):
        fee = amount * self.fee_bps // FEE_DENOMINATOR
        self._set_balance(frm, self.balance_of(frm) - amount)
        self._set_balance(to, self.balance_of(to) + amount - fee)
        self.total_supply -= fee
        self._after_move(frm, to, amount - fee)

    def to_dict(self):
        data = super().to_dict()
        data["fee_bps"] = self.fee_bps
        return data


class PoolShareToken(Token):
    """Fungible claim on a pool's reserves. The pool is its only issuer."""

    kind = "pool_share"

    def __init__(self, address: str, symbol: str | None = None):
        super().__init__(address, symbol or f"SHARE-{address[2:10]}")
