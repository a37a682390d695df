"""
Milestone Catalog

The fixed, ordered list of milestones tracked by the overlay. Order is
meaningful: it defines progress ordering and the notification order.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Milestone:
    """A named checkpoint identified by a stable key."""
    key: str
    label: str
    detail: str


class MilestoneCatalog:
    """Read-only ordered sequence of milestones."""

    def __init__(self, milestones: Iterable[Milestone]):
        self._milestones = tuple(milestones)
        if not self._milestones:
            raise ValueError("MilestoneCatalog requires at least one milestone")

        self._by_key: Dict[str, Milestone] = {}
        for milestone in self._milestones:
            if milestone.key in self._by_key:
                raise ValueError(f"Duplicate milestone key: {milestone.key}")
            self._by_key[milestone.key] = milestone

    def __iter__(self) -> Iterator[Milestone]:
        return iter(self._milestones)

    def __len__(self) -> int:
        return len(self._milestones)

    def __getitem__(self, index: int) -> Milestone:
        return self._milestones[index]

    def keys(self) -> List[str]:
        return [m.key for m in self._milestones]

    def get(self, key: str) -> Optional[Milestone]:
        return self._by_key.get(key)

    def __repr__(self) -> str:
        return f"MilestoneCatalog({self.keys()!r})"


DEFAULT_CATALOG = MilestoneCatalog([
    Milestone('idea_locked', 'idea locked', "you know what you're building"),
    Milestone('first_screen', 'first screen', 'something real on the page'),
    Milestone('features_added', 'features added', 'it does things now'),
    Milestone('deployed', 'deployed', 'live on the internet'),
    Milestone('shared', 'shared', 'someone else has seen it'),
])
