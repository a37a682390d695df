"""
State Reconciler

Owns the retained snapshot from the previous successful tick and computes
which milestones moved from incomplete to complete since then.

The first successful snapshot after start-up is only retained, never
diffed: milestones completed in an earlier session must not fire again
when the overlay is reloaded.

A milestone is emitted at most once per reconciler lifetime. If the source
reverts a flag to false and later back to true, the second transition is
not emitted again.
"""
from typing import Dict, List, Mapping, Set

from core.logging import get_logger
from milestones.catalog import DEFAULT_CATALOG, Milestone, MilestoneCatalog

logger = get_logger(__name__)


class StateReconciler:
    """
    Single-writer holder of the retained snapshot and the first-tick flag.

    Only call reconcile() with successfully fetched snapshots; a failed
    fetch must leave the retained state untouched.
    """

    def __init__(self, catalog: MilestoneCatalog = DEFAULT_CATALOG):
        self.catalog = catalog
        self._retained: Dict[str, bool] = {}
        self._first_tick = True
        self._emitted: Set[str] = set()

    @property
    def is_first_tick(self) -> bool:
        return self._first_tick

    @property
    def retained(self) -> Dict[str, bool]:
        return dict(self._retained)

    def reconcile(self, snapshot: Mapping[str, bool]) -> List[Milestone]:
        """
        Compare `snapshot` with the retained one and retain it.

        Returns:
            Milestones true now and false or absent before, in catalog
            order. Always empty on the first call.
        """
        if self._first_tick:
            newly_completed: List[Milestone] = []
            already_done = [m.key for m in self.catalog if snapshot.get(m.key, False)]
            logger.info(f"Initial snapshot retained without notifications (already complete: {already_done})")
        else:
            newly_completed = [
                m for m in self.catalog
                if snapshot.get(m.key, False)
                and not self._retained.get(m.key, False)
                and m.key not in self._emitted
            ]
            self._emitted.update(m.key for m in newly_completed)
            reverted = [
                m.key for m in self.catalog
                if self._retained.get(m.key, False) and not snapshot.get(m.key, False)
            ]
            if reverted:
                logger.warning(f"Milestones reported complete earlier are now incomplete: {reverted}")

        self._retained = {m.key: bool(snapshot.get(m.key, False)) for m in self.catalog}
        self._first_tick = False

        if newly_completed:
            logger.info(f"Newly completed milestones: {[m.key for m in newly_completed]}")

        return newly_completed
