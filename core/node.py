# core/node.py

import threading
from collections import deque

from core import genesis
from core.events import event_to_dict
from core.operator_keystore import load_or_create_operator_key, pubkey_to_address, sign_receipt
from core.registry import PoolRegistry
from core.storage import StateStorage
from core.tx_engine import TransactionEngine

EVENT_HISTORY = 1_000


class PoolNode:
    """
    Serialises signed transactions against a registry of pools.

    One submit at a time: validate, apply, bump nonce, persist, receipt.
    A rejected tx changes nothing and does not consume its nonce.
    """

    def __init__(self, registry: PoolRegistry, chain_id: int, signing_key, storage=None, nonces=None):
        self.registry = registry
        self.chain_id = chain_id
        self.signing_key = signing_key
        self.storage = storage
        self.nonces = dict(nonces or {})
        self.tx_engine = TransactionEngine(chain_id)
        self.events = deque(maxlen=EVENT_HISTORY)
        self._lock = threading.Lock()

        for pool in registry.all_pools():
            pool.events.subscribe(self._on_event)

    @property
    def operator_address(self) -> str:
        return pubkey_to_address(self.signing_key.verify_key.encode())

    @property
    def operator_pubkey(self) -> str:
        return self.signing_key.verify_key.encode().hex()

    # --------------------------------------------------
    # BOOT
    # --------------------------------------------------

    @classmethod
    def boot(cls, data_dir, chain_id: int, genesis_file, persist=True):
        signing_key = load_or_create_operator_key(data_dir)
        storage = StateStorage(data_dir) if persist else None

        state = storage.load() if storage else None

        if state:
            if state.get("chain_id") != chain_id:
                raise ValueError("Stored state belongs to another chainId")
            registry = PoolRegistry.from_dict(state["registry"])
            print(f"✅ State loaded: {len(registry.pools)} pools, {len(registry.tokens)} tokens")
            return cls(registry, chain_id, signing_key, storage, state.get("nonces"))

        genesis_data = genesis.load_genesis(genesis_file)
        if genesis_data is None:
            print(f"⚠️ No genesis file at {genesis_file}, starting empty")
            registry = PoolRegistry()
        else:
            if genesis_data.get("chain_id", chain_id) != chain_id:
                raise ValueError("Genesis belongs to another chainId")
            registry = genesis.generate(genesis_data)

        node = cls(registry, chain_id, signing_key, storage)
        node.persist()
        return node

    # --------------------------------------------------
    # TX
    # --------------------------------------------------

    def submit(self, tx: dict, signature: str) -> tuple:
        with self._lock:
            try:
                tx = self.tx_engine.validate(tx, signature, self.nonces)
                result = self.tx_engine.apply_tx(self.registry, tx)
            except ValueError as e:
                print(f"❌ DISCARDED: {e}")
                raise

            sender = tx["sender"]
            self.nonces[sender] = tx["nonce"] + 1
            self.persist()

            receipt = sign_receipt(self.signing_key, {
                "txid": tx["txid"],
                "sender": sender,
                "action": tx["action"],
                "nonce": tx["nonce"],
                "chainId": self.chain_id,
                "result": result,
            })

        print(f"📝 {tx['action']} by {sender}: {result}")
        return result, receipt

    def next_nonce(self, address: str) -> int:
        return self.nonces.get(address.lower(), 0)

    def latest_events(self, limit: int = 50) -> list:
        if limit <= 0:
            return []
        return list(self.events)[-limit:]

    # --------------------------------------------------

    def _on_event(self, pool_address, event):
        self.events.append(event_to_dict(event, pool_address))

    def to_state(self) -> dict:
        return {
            "chain_id": self.chain_id,
            "nonces": dict(self.nonces),
            "registry": self.registry.to_dict(),
        }

    def persist(self):
        if self.storage is None:
            return
        self.storage.save(self.to_state())
        print("💾 State saved")
