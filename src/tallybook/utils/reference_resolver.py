"""Utility for resolving reference names to IDs."""

from typing import Callable, Iterable, Optional, Protocol


class _Named(Protocol):
    id: int
    name: str


def resolve_reference(
    label: str,
    value: str | int,
    get_by_id: Callable[[int], Optional[_Named]],
    list_all: Callable[[], Iterable[_Named]],
) -> int:
    """Resolve a company, client or category given by name or ID.

    Args:
        label: Entity label used in error messages (e.g. "Company")
        value: Name (str) or ID (int or string representation of int)
        get_by_id: Lookup by ID returning None when not found
        list_all: Returns all candidate entities

    Returns:
        Entity ID

    Raises:
        ValueError: If nothing matches
    """
    if isinstance(value, int):
        if get_by_id(value) is None:
            raise ValueError(f"{label} ID {value} not found")
        return value

    try:
        entity_id = int(value)
    except (ValueError, TypeError):
        entity_id = None

    if entity_id is not None:
        if get_by_id(entity_id) is None:
            raise ValueError(f"{label} ID {entity_id} not found")
        return entity_id

    # Exact, case-sensitive name match
    for entity in list_all():
        if entity.name == value:
            return entity.id

    raise ValueError(f"{label} '{value}' not found")
