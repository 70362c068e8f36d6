"""Write auditing as a wrapper around gateway calls.

The ledger never resolves identity; the HTTP layer knows both the owner a
write is for and the actor performing it, and records that pairing here.
While the write runs, both ids are bound to the log context so the handler's
own events carry them too.
"""

import functools

from ledger.domain import logger
from ledger.utils.logging import log_context


def audited(func, caller):
    """Return ``func`` bound to ``caller.owner_id``, logging the write first."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        actor_id = caller.actor_id or caller.owner_id
        with log_context(actor_id=actor_id, impersonated=actor_id != caller.owner_id):
            logger.info("ledger_write", operation=func.__name__, owner_id=caller.owner_id)
            return func(caller.owner_id, *args, **kwargs)

    return wrapper
