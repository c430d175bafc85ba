# core/crypto.py
import json
from pathlib import Path

from cryptography.fernet import Fernet

FERNET_KEY_NAME = "node.fernet.key"


def load_or_create_key(data_dir, name: str = FERNET_KEY_NAME) -> bytes:
    """Fernet key stored in data_dir, generated on first use."""
    data_dir = Path(data_dir)
    key_file = data_dir / name
    if key_file.exists():
        return key_file.read_bytes()

    data_dir.mkdir(parents=True, exist_ok=True)
    key = Fernet.generate_key()
    key_file.write_bytes(key)
    return key


class CryptoStore:
    """Encrypted JSON blobs for everything the node keeps on disk."""

    def __init__(self, data_dir, key_name: str = FERNET_KEY_NAME):
        self.fernet = Fernet(load_or_create_key(data_dir, key_name))

    def encrypt(self, obj) -> bytes:
        return self.encrypt_bytes(json.dumps(obj, sort_keys=True).encode())

    def decrypt(self, data: bytes):
        return json.loads(self.decrypt_bytes(data))

    def encrypt_bytes(self, raw: bytes) -> bytes:
        return self.fernet.encrypt(raw)

    def decrypt_bytes(self, data: bytes) -> bytes:
        return self.fernet.decrypt(data)
