"""Arena of live UI element handles keyed by integer ids."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Tuple


class ElementArena:
    """
    Assigns monotonically increasing ids to element handles.

    ``register`` always allocates a new slot. ``identify`` reuses the slot of a
    handle already seen, matching on object identity rather than equality.
    Handles stay referenced by the arena so their ids cannot be recycled.
    """

    def __init__(self, first_id: int = 0) -> None:
        self._first_id = first_id
        self._next_id = first_id
        self._handles: Dict[int, Any] = {}
        self._by_identity: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[Tuple[int, Any]]:
        return iter(self._handles.items())

    def register(self, handle: Any) -> int:
        element_id = self._next_id
        self._next_id += 1
        self._handles[element_id] = handle
        self._by_identity.setdefault(id(handle), element_id)
        return element_id

    def identify(self, handle: Any) -> Tuple[int, bool]:
        """Return ``(id, created)`` for ``handle``."""
        existing = self._by_identity.get(id(handle))
        if existing is not None:
            return existing, False
        return self.register(handle), True

    def get(self, element_id: int) -> Any:
        return self._handles.get(element_id)

    def clear(self) -> None:
        self._handles.clear()
        self._by_identity.clear()
        self._next_id = self._first_id
