# core/unit_of_work.py

from copy import deepcopy
from typing import Iterable


class UnitOfWork:
    """
    All-or-nothing scope over a set of stateful objects.

    On enter the __dict__ of every object is snapshotted; if an exception
    leaves the block every object is restored and the exception propagates.
    Attributes listed in an object's `_uow_skip` are left untouched.

    Snapshots are full deep copies, so entering costs time and memory in
    proportion to the state of the objects passed in (for a token, every
    holder balance and allowance), not to what the block touches. Pass
    only the objects the block can change.
    """

    def __init__(self, objects: Iterable[object], name: str = "uow"):
        self.objects = list(objects)
        self.name = name
        self._snapshots = {}

    def __enter__(self):
        self._snapshots = {id(obj): self._snapshot(obj) for obj in self.objects}
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.rollback()
        self._snapshots = {}
        return False

    @staticmethod
    def _snapshot(obj):
        skip = getattr(obj, "_uow_skip", ())
        return {key: deepcopy(value) for key, value in obj.__dict__.items() if key not in skip}

    def rollback(self):
        for obj in self.objects:
            snap = self._snapshots.get(id(obj))
            if snap is None:
                continue
            skip = getattr(obj, "_uow_skip", ())
            for key in [key for key in obj.__dict__ if key not in skip]:
                del obj.__dict__[key]
            obj.__dict__.update(deepcopy(snap))
