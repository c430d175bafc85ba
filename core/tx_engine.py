# core/tx_engine.py

from eth_account import Account
from eth_account.messages import encode_defunct

from core.errors import TransferFailed
from core.transaction import ACTIONS, Transaction
from core.utils import canonical_tx, norm, parse_amount

# params each action must carry, and which of them are amounts
REQUIRED_PARAMS = {
    "approve": ("asset", "spender", "amount"),
    "transfer": ("asset", "to", "amount"),
    "swap": ("asset_in", "asset_out", "amount_in"),
    "add_liquidity": ("asset_x", "asset_y", "amount_a_desired", "amount_b_desired"),
    "remove_liquidity": ("asset_x", "asset_y", "shares"),
}

AMOUNT_PARAMS = ("amount", "amount_in", "amount_a_desired", "amount_b_desired", "shares")


def recover_sender(tx: dict, signature: str) -> str:
    message = canonical_tx(tx)
    recovered = Account.recover_message(
        encode_defunct(text=message),
        signature=signature
    )
    return recovered.lower()


def sign_tx(tx: dict, private_key) -> str:
    signed = Account.sign_message(encode_defunct(text=canonical_tx(tx)), private_key=private_key)
    return "0x" + signed.signature.hex().removeprefix("0x")


class TransactionEngine:
    def __init__(self, chain_id: int):
        self.chain_id = chain_id

    def validate(self, tx: dict, signature: str, nonces: dict) -> dict:
        """
        Checks signature, chainId, nonce and params. Returns the tx with
        normalised sender and integer amounts.
        """
        action = tx.get("action")
        sender = norm(tx.get("sender"))

        # 0. BASIC CHECK
        if not action:
            raise ValueError("Missing action")

        if action not in ACTIONS:
            raise ValueError("Unknown action")

        if not sender:
            raise ValueError("Missing sender")

        if tx.get("chainId") != self.chain_id:
            raise ValueError("Invalid chainId")

        if not signature:
            raise ValueError("Missing signature")

        # 1. TXID
        if not tx.get("txid"):
            raise ValueError("Missing txid")
        Transaction.from_dict(tx)

        # 2. SIGN
        try:
            recovered = recover_sender(tx, signature)
        except Exception:
            raise ValueError("Invalid signature format")

        if recovered != sender:
            raise ValueError("Invalid signature")

        # 3. NONCE
        nonce = tx.get("nonce")
        if nonce is None:
            raise ValueError("Missing nonce")

        expected_nonce = nonces.get(sender, 0)
        if nonce != expected_nonce:
            raise ValueError(
                f"Invalid nonce: expected {expected_nonce}, got {nonce}"
            )

        # 4. PARAMS
        params = dict(tx.get("params") or {})
        for key in REQUIRED_PARAMS[action]:
            if key not in params:
                raise ValueError(f"Missing param: {key}")

        for key in AMOUNT_PARAMS:
            if key in params:
                params[key] = parse_amount(params[key], key)

        return {**tx, "sender": sender, "params": params}

    def apply_tx(self, registry, tx: dict) -> dict:
        action = tx["action"]
        sender = tx["sender"]
        p = tx["params"]

        if action == "approve":
            token = registry.get_token(p["asset"])
            if not token.approve(sender, p["spender"], p["amount"]):
                raise ValueError("Invalid allowance")
            return {"allowance": token.allowance(sender, p["spender"])}

        elif action == "transfer":
            token = registry.get_token(p["asset"])
            if not token.transfer(sender, p["to"], p["amount"]):
                raise TransferFailed("Insufficient asset balance")
            return {"balance": token.balance_of(sender)}

        elif action == "swap":
            pool = registry.get_pool(p["asset_in"], p["asset_out"])
            amount_out = pool.swap(sender, p["asset_in"], p["asset_out"], p["amount_in"])
            return {"amount_out": amount_out}

        elif action == "add_liquidity":
            pool = registry.get_pool(p["asset_x"], p["asset_y"])
            actual_a, actual_b, shares = pool.add_liquidity(
                sender, p["amount_a_desired"], p["amount_b_desired"]
            )
            return {"amount_a": actual_a, "amount_b": actual_b, "shares": shares}

        elif action == "remove_liquidity":
            pool = registry.get_pool(p["asset_x"], p["asset_y"])
            amount_a, amount_b = pool.remove_liquidity(sender, p["shares"])
            return {"amount_a": amount_a, "amount_b": amount_b}

        raise ValueError("Unknown action")
