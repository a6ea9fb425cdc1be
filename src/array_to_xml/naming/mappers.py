"""Name mapper registry.

A name mapper computes the element name of a list item from the singular
item name, the item's position and the item itself::

    def by_id(name, index, value):
        return name + value["id"]

    registry = NameMapperRegistry().register("element", by_id)

Lookup is by exact match on the singular item name (``element`` for a
``elements`` list), never on the container name.
"""

from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

NameMapper = Callable[[str, int, Any], str]

DEFAULT_MAPPER_NAME = "default"


def identity_mapper(item_name: str, index: int, value: Any) -> str:
    """Return the item name unchanged."""
    return item_name


class NameMapperRegistry:
    """Mapping of singular item names to name mapper functions.

    The registry always holds a ``"default"`` entry, used for every item
    name without its own mapper. Registering ``"default"`` replaces it.
    """

    def __init__(self, mappers: Optional[Mapping[str, NameMapper]] = None) -> None:
        self._mappers: Dict[str, NameMapper] = {DEFAULT_MAPPER_NAME: identity_mapper}
        if mappers:
            self.update(mappers)

    def register(self, name: str, mapper: NameMapper) -> "NameMapperRegistry":
        """Register ``mapper`` for item ``name``, replacing any previous entry.

        Returns:
            The registry, for chaining
        """
        if not callable(mapper):
            raise TypeError(f"Name mapper for {name!r} must be callable")
        self._mappers[name] = mapper
        return self

    def update(self, mappers: Mapping[str, NameMapper]) -> "NameMapperRegistry":
        for name, mapper in mappers.items():
            self.register(name, mapper)
        return self

    def resolve(self, item_name: str) -> NameMapper:
        """Return the mapper registered for ``item_name`` or the default one."""
        return self._mappers.get(item_name, self._mappers[DEFAULT_MAPPER_NAME])

    def copy(self) -> "NameMapperRegistry":
        return NameMapperRegistry(self._mappers)

    def names(self) -> List[str]:
        return list(self._mappers)

    def __contains__(self, name: object) -> bool:
        return name in self._mappers

    def __len__(self) -> int:
        return len(self._mappers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._mappers)

    def __repr__(self) -> str:
        return f"NameMapperRegistry({self.names()!r})"
