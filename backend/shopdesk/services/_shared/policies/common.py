def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource (ids compared as strings)."""
    return str(actor_id) == str(owner_id)


def is_self(*, actor_id, target_id) -> bool:
    """Return True if an admin action targets the acting account."""
    return str(actor_id) == str(target_id)
