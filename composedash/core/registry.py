"""Container registry: the ordered service list and its color pairings."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Sequence

from .exceptions import ContainerNotFound

PALETTE = ('red', 'green', 'blue', 'yellow', 'cyan', 'magenta')


@dataclass(frozen=True)
class Container:
    """A named service from the compose file."""
    name: str
    index: int
    color: str


class ContainerRegistry:
    """Immutable, ordered lookup of containers by index or name."""

    def __init__(self, names: Iterable[str], palette: Sequence[str] = PALETTE):
        if not palette:
            raise ValueError("palette must contain at least one color")
        self._containers = tuple(
            Container(name=name, index=index, color=palette[index % len(palette)])
            for index, name in enumerate(names)
        )
        self._by_name = {c.name: c for c in self._containers}
        self._color_pairings = MappingProxyType({c.name: c.color for c in self._containers})

    def list(self) -> List[Container]:
        return list(self._containers)

    def by_index(self, index: int) -> Container:
        if 0 <= index < len(self._containers):
            return self._containers[index]
        raise ContainerNotFound(index)

    def by_name(self, name: str) -> Container:
        try:
            return self._by_name[name]
        except KeyError:
            raise ContainerNotFound(name) from None

    @property
    def color_pairings(self) -> Mapping[str, str]:
        """Read-only name -> color mapping."""
        return self._color_pairings

    def __len__(self):
        return len(self._containers)

    def __iter__(self) -> Iterator[Container]:
        return iter(self._containers)
