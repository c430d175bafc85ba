# core/utils.py
import hashlib
import json


def canonical_json(obj):
    return json.dumps(obj, sort_keys=True, separators=(",", ":")).encode()


def canonical_tx(tx: dict) -> str:
    """
    Returns the canonical representation of the tx
    with keys in a specific order (MUST match the client)
    """
    ordered = {
        "txid": tx.get("txid"),
        "sender": norm(tx.get("sender")),
        "action": tx.get("action"),
        "params": tx.get("params", {}),
        "nonce": tx.get("nonce"),
        "chainId": tx.get("chainId"),
    }

    return json.dumps(ordered, separators=(",", ":"), sort_keys=True)


def norm(addr: str) -> str:
    return addr.lower() if addr else addr


def is_hex_address(value) -> bool:
    if not isinstance(value, str) or not value.startswith("0x"):
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return True


def canonical_id(identity: str) -> str:
    """Addresses are case-insensitive, symbols are not."""
    if not identity:
        return identity
    if is_hex_address(identity):
        return identity.lower()
    return identity


def asset_sort_key(identity: str):
    if is_hex_address(identity):
        return (0, int(identity, 16), identity)
    return (1, 0, identity)


def derive_address(*parts: str) -> str:
    digest = hashlib.sha256("|".join(parts).encode()).digest()
    return "0x" + digest[-20:].hex()


def parse_amount(value, name="amount") -> int:
    """
    Accepts a JSON integer or a decimal string of digits.
    """
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"{name} must be non-negative")
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise ValueError(f"{name} must be an integer")


def loading(operator_address, host, port):
    print(r'  ____              _   _   _           _       ')
    print(r' |  _ \ ___   ___ | | | \ | | ___   __| | ___  ')
    print(r' | |_) / _ \ / _ \| | |  \| |/ _ \ / _` |/ _ \ ')
    print(r' |  __/ (_) | (_) | | | |\  | (_) | (_| |  __/ ')
    print(r' |_|   \___/ \___/|_| |_| \_|\___/ \__,_|\___| ')
    print()
    print("🚀 Pool node starting... ")
    print(f"🆔 Operator: {operator_address}")
    print(f"🌐 Listening on {host}:{port}")
