from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain


def load_owned(aggregate_cls, identifier, owner_id):
    """Fetch an aggregate by id, hiding records that belong to another owner.

    A foreign record raises the same ``ObjectNotFoundError`` as a missing one.
    """
    record = current_domain.repository_for(aggregate_cls).get(identifier)
    if str(record.owner_id) != str(owner_id):
        raise ObjectNotFoundError(
            {"_entity": [f"`{aggregate_cls.__name__}` object with identifier {identifier} does not exist."]}
        )
    return record
