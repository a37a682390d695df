"""
Progress Calculator

Maps a Snapshot to the 1-based "current step": the position of the first
incomplete milestone in catalog order, or N + 1 once everything is done.

A later milestone being complete never advances the step past an earlier
gap.
"""
import math
from dataclasses import dataclass
from typing import Mapping

from milestones.catalog import DEFAULT_CATALOG, MilestoneCatalog


@dataclass(frozen=True)
class ProgressView:
    """Display-ready progress derived from the current step."""
    current_step: int
    total: int

    @property
    def display_step(self) -> int:
        """Step shown as 'step X of N'; never exceeds N."""
        return min(self.current_step, self.total)

    @property
    def completed_count(self) -> int:
        return self.current_step - 1

    @property
    def percent(self) -> int:
        # half-up rounding, so 2.5 -> 3 rather than banker's rounding
        return int(math.floor(self.completed_count / self.total * 100 + 0.5))

    @property
    def is_complete(self) -> bool:
        return self.current_step > self.total


def compute_current_step(snapshot: Mapping[str, bool], catalog: MilestoneCatalog = DEFAULT_CATALOG) -> int:
    for index, milestone in enumerate(catalog):
        if not snapshot.get(milestone.key, False):
            return index + 1
    return len(catalog) + 1


def build_progress_view(current_step: int, catalog: MilestoneCatalog = DEFAULT_CATALOG) -> ProgressView:
    return ProgressView(current_step=current_step, total=len(catalog))
