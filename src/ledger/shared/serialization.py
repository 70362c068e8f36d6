"""Per-item write serialization.

Recording a sale reads the item's totals and then inserts the sale. Two
concurrent writers for the same item could both pass the stock check, so
every stock-affecting write holds the item's lock from the check until the
unit of work has committed. Locks are process-local, and a lock is dropped
from the registry once no writer holds or waits on it.
"""

import threading
import weakref
from contextlib import contextmanager

_registry_lock = threading.Lock()
_item_locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()


def _lock_for(owner_id, item_id) -> threading.RLock:
    key = (str(owner_id), str(item_id))
    with _registry_lock:
        lock = _item_locks.get(key)
        if lock is None:
            lock = _item_locks[key] = threading.RLock()
        return lock


@contextmanager
def item_lock(owner_id, item_id):
    """Hold the write lock for one owner's item. Re-entrant within a thread."""
    lock = _lock_for(owner_id, item_id)
    with lock:
        yield


def reset_item_locks():
    """Forget all item locks (test isolation)."""
    with _registry_lock:
        _item_locks.clear()
