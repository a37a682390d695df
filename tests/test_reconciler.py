"""
Tests for StateReconciler.

Covers: first-tick suppression, idempotence, catalog ordering, reversion
and the at-most-once guarantee.
"""
from milestones.catalog import Milestone, MilestoneCatalog
from milestones.reconciler import StateReconciler

CATALOG = MilestoneCatalog([Milestone(k, k.lower(), '') for k in ('A', 'B', 'C')])


def keys(milestones):
    return [m.key for m in milestones]


class TestFirstTick:
    """The first successful snapshot is retained but never diffed."""

    def test_first_snapshot_emits_nothing(self):
        """Already-complete milestones must not fire after a reload."""
        reconciler = StateReconciler(CATALOG)
        assert reconciler.is_first_tick is True

        assert reconciler.reconcile({'A': True, 'B': False, 'C': False}) == []
        assert reconciler.is_first_tick is False

    def test_first_snapshot_is_retained(self):
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({'A': True})
        assert reconciler.retained == {'A': True, 'B': False, 'C': False}

    def test_all_complete_on_first_tick_never_fires(self):
        reconciler = StateReconciler(CATALOG)
        full = {'A': True, 'B': True, 'C': True}
        assert reconciler.reconcile(full) == []
        assert reconciler.reconcile(full) == []


class TestNewlyCompleted:
    """Diffing of consecutive snapshots."""

    def test_single_transition(self):
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({'A': True, 'B': False, 'C': False})
        assert keys(reconciler.reconcile({'A': True, 'B': True, 'C': False})) == ['B']

    def test_same_snapshot_twice_is_idempotent(self):
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({'A': False, 'B': False, 'C': False})
        snapshot = {'A': True, 'B': False, 'C': False}
        assert keys(reconciler.reconcile(snapshot)) == ['A']
        assert reconciler.reconcile(snapshot) == []

    def test_simultaneous_completions_in_catalog_order(self):
        """Order follows the catalog, not the document's key order."""
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({'A': False, 'B': False, 'C': False})
        newly = reconciler.reconcile({'C': True, 'A': True, 'B': False})
        assert keys(newly) == ['A', 'C']

    def test_unknown_keys_are_ignored(self):
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({})
        assert keys(reconciler.reconcile({'Z': True, 'A': True})) == ['A']
        assert 'Z' not in reconciler.retained

    def test_retained_is_a_copy(self):
        """Mutating the caller's snapshot or the exposed copy leaves state alone."""
        reconciler = StateReconciler(CATALOG)
        snapshot = {'A': True, 'B': False, 'C': False}
        reconciler.reconcile(snapshot)
        snapshot['B'] = True
        reconciler.retained['C'] = True
        assert reconciler.retained == {'A': True, 'B': False, 'C': False}


class TestReversion:
    """A flag going back to false is logged but never un-notified or re-notified."""

    def test_reversion_emits_nothing(self):
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({'A': True, 'B': True})
        assert reconciler.reconcile({'A': True, 'B': False}) == []
        assert reconciler.retained['B'] is False

    def test_milestone_fires_at_most_once(self):
        """Once emitted, a key never appears again even after a revert."""
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({})
        assert keys(reconciler.reconcile({'A': True})) == ['A']
        assert reconciler.reconcile({'A': False}) == []
        assert reconciler.reconcile({'A': True}) == []

    def test_reverted_before_ever_emitted_can_still_fire(self):
        """Keys complete at load were never emitted, so a later completion counts."""
        reconciler = StateReconciler(CATALOG)
        reconciler.reconcile({'A': True})
        reconciler.reconcile({'A': False})
        assert keys(reconciler.reconcile({'A': True})) == ['A']
