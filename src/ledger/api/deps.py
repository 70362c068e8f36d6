"""Request-scoped caller identity, taken from headers set by the outer layer."""

from dataclasses import dataclass

from fastapi import Header


@dataclass(frozen=True)
class Caller:
    owner_id: str
    actor_id: str | None = None  # Set when an operator acts on the owner's behalf


def get_caller(
    x_owner_id: str = Header(..., min_length=1),
    x_actor_id: str | None = Header(default=None),
) -> Caller:
    return Caller(owner_id=x_owner_id, actor_id=x_actor_id)
