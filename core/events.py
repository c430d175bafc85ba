# core/events.py

from dataclasses import asdict, dataclass
from typing import Callable, List


@dataclass(frozen=True)
class Swap:
    caller: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class AddLiquidity:
    caller: str
    amount_a: int
    amount_b: int
    shares: int


@dataclass(frozen=True)
class RemoveLiquidity:
    caller: str
    amount_a: int
    amount_b: int
    shares: int


def event_to_dict(event, pool: str | None = None) -> dict:
    data = {"event": type(event).__name__, **asdict(event)}
    if pool is not None:
        data["pool"] = pool
    return data


class EventLog:
    """Committed notifications of one pool, oldest first."""

    def __init__(self, pool_address: str):
        self.pool_address = pool_address
        self.history = []
        self.subscribers: List[Callable] = []

    def subscribe(self, callback: Callable):
        self.subscribers.append(callback)

    def publish(self, event):
        self.history.append(event)
        for callback in list(self.subscribers):
            callback(self.pool_address, event)

    def latest(self, limit: int = 50) -> list:
        if limit <= 0:
            return []
        return [event_to_dict(e, self.pool_address) for e in self.history[-limit:]]

    def __len__(self):
        return len(self.history)
