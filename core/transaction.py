# core/transaction.py
import hashlib

from core.utils import canonical_json

ACTIONS = ("approve", "transfer", "swap", "add_liquidity", "remove_liquidity")


class Transaction:
    def __init__(
        self,
        sender,
        action,
        params,
        nonce,
        chainId=1,
    ):
        self.sender = sender.lower() if sender else sender
        self.action = action
        self.params = dict(params or {})
        self.nonce = nonce
        self.chainId = chainId

        self.txid = self.hash()

    def hash(self):
        """
        Deterministic TXID over everything the sender signs
        """
        payload = {
            "sender": self.sender,
            "action": self.action,
            "params": self.params,
            "nonce": self.nonce,
            "chainId": self.chainId,
        }

        return hashlib.sha256(canonical_json(payload)).hexdigest()

    def to_dict(self):
        return {
            "txid": self.txid,
            "sender": self.sender,
            "action": self.action,
            "params": self.params,
            "nonce": self.nonce,
            "chainId": self.chainId,
        }

    @classmethod
    def from_dict(cls, data: dict):
        tx = cls(
            sender=data.get("sender"),
            action=data.get("action"),
            params=data.get("params"),
            nonce=data.get("nonce"),
            chainId=data.get("chainId"),
        )
        if data.get("txid") is not None and data["txid"] != tx.txid:
            raise ValueError("Invalid txid")
        return tx
