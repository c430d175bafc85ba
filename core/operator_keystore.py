# core/operator_keystore.py
from hashlib import sha256
from pathlib import Path

from nacl.encoding import RawEncoder
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from core.crypto import CryptoStore
from core.utils import canonical_json

OPERATOR_FERNET_KEY_NAME = "operator.fernet.key"
OPERATOR_KEY_NAME = "operator.key"


def load_or_create_operator_key(data_dir) -> SigningKey:
    """
    Ed25519 key the node signs receipts with, encrypted at rest.
    """
    key_file = Path(data_dir) / OPERATOR_KEY_NAME
    store = CryptoStore(data_dir, OPERATOR_FERNET_KEY_NAME)

    if key_file.exists():
        return SigningKey(store.decrypt_bytes(key_file.read_bytes()), encoder=RawEncoder)

    sk = SigningKey.generate()
    key_file.write_bytes(store.encrypt_bytes(sk.encode(encoder=RawEncoder)))
    print(f"🔑 New operator key: {pubkey_to_address(sk.verify_key.encode())}")
    return sk


def pubkey_to_address(pubkey_bytes: bytes) -> str:
    digest = sha256(pubkey_bytes).digest()
    return "0x" + digest[-20:].hex()


def sign_receipt(sk: SigningKey, body: dict) -> dict:
    """
    Receipt for a committed transaction, signed by the operator.
    """
    signature = sk.sign(canonical_json(body)).signature.hex()
    return {
        **body,
        "operator": pubkey_to_address(sk.verify_key.encode()),
        "signature": signature,
    }


def verify_receipt(receipt: dict, pubkey: bytes) -> bool:
    body = {k: v for k, v in receipt.items() if k not in ("operator", "signature")}

    try:
        vk = VerifyKey(pubkey, encoder=RawEncoder)
        vk.verify(canonical_json(body), bytes.fromhex(receipt["signature"]))
        return True
    except (BadSignatureError, KeyError, ValueError):
        return False
