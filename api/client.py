"""
HTTP client for a pool node.

Usage:
    client = PoolClient("http://localhost:8000", private_key=key)
    client.send("swap", {"asset_in": a, "asset_out": b, "amount_in": 10})
"""

import requests
from eth_account import Account

from core.transaction import Transaction
from core.tx_engine import sign_tx


class ClientError(Exception):
    """Request to the node failed."""


class PoolClient:

    def __init__(self, base_url: str, private_key=None, timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.account = Account.from_key(private_key) if private_key else None

    @property
    def address(self):
        return self.account.address.lower() if self.account else None

    def _get(self, path: str, params: dict = None):
        try:
            response = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ClientError(f"GET {path} failed: {e}") from e
        return response.json()

    def _post(self, path: str, payload: dict):
        try:
            response = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ClientError(f"POST {path} failed: {e}") from e
        return response.json()

    # --------------------------------------------------
    # READS
    # --------------------------------------------------

    def health(self) -> dict:
        return self._get("/health")

    def operator(self) -> dict:
        return self._get("/operator")

    def pools(self) -> list:
        return self._get("/pools")

    def pool(self, asset_x: str, asset_y: str) -> dict:
        return self._get(f"/pools/{asset_x}/{asset_y}")

    def pool_at(self, address: str) -> dict:
        return self._get(f"/pool/{address}")

    def reserves(self, asset_x: str, asset_y: str) -> dict:
        return self._get(f"/pools/{asset_x}/{asset_y}/reserves")

    def quote(self, asset_x: str, asset_y: str, asset_in: str, amount_in: int) -> dict:
        return self._get(
            f"/pools/{asset_x}/{asset_y}/quote",
            {"asset_in": asset_in, "amount_in": amount_in},
        )

    def balance(self, address: str = None) -> dict:
        return self._get(f"/balance/{address or self.address}")

    def nonce(self, address: str = None) -> int:
        return self._get(f"/nonce/{address or self.address}")["nonce"]

    def events(self, limit: int = 50) -> list:
        return self._get("/events", {"limit": limit})["events"]

    # --------------------------------------------------
    # WRITES
    # --------------------------------------------------

    def send(self, action: str, params: dict, chain_id: int = None) -> dict:
        if self.account is None:
            raise ClientError("A private key is required to send transactions")

        if chain_id is None:
            chain_id = self.operator()["chainId"]

        tx = Transaction(
            sender=self.address,
            action=action,
            params=params,
            nonce=self.nonce(),
            chainId=chain_id,
        ).to_dict()

        signature = sign_tx(tx, self.account.key)
        return self._post("/tx/send", {"tx": tx, "signature": signature})
