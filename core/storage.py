# core/storage.py
import hashlib
from pathlib import Path

from core.crypto import CryptoStore
from core.utils import canonical_json

STATE_FILE_NAME = "state.enc"


def state_hash(state: dict) -> str:
    return hashlib.sha256(canonical_json(state)).hexdigest()


class StateStorage:
    def __init__(self, data_dir):
        self.path = Path(data_dir) / STATE_FILE_NAME
        self.crypto = CryptoStore(data_dir)

    def save(self, state: dict):
        payload = {"state": state, "hash": state_hash(state)}
        encrypted = self.crypto.encrypt(payload)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_bytes(encrypted)
        tmp.replace(self.path)

    def load(self):
        if not self.path.exists():
            return None

        payload = self.crypto.decrypt(self.path.read_bytes())
        state = payload.get("state")

        if state is None or state_hash(state) != payload.get("hash"):
            raise ValueError("Invalid state hash")

        return state
