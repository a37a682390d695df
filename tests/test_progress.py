"""
Tests for the milestone catalog and current-step computation.
"""
import pytest

from milestones.catalog import DEFAULT_CATALOG, Milestone, MilestoneCatalog
from milestones.progress import ProgressView, build_progress_view, compute_current_step


def flags(*values):
    """Build a snapshot for DEFAULT_CATALOG from positional booleans."""
    return dict(zip(DEFAULT_CATALOG.keys(), values))


class TestMilestoneCatalog:
    """Tests for MilestoneCatalog."""

    def test_default_catalog_order(self):
        """Default catalog keeps the tracked order."""
        assert DEFAULT_CATALOG.keys() == [
            'idea_locked', 'first_screen', 'features_added', 'deployed', 'shared'
        ]

    def test_index_and_key_lookup(self):
        """Milestones are reachable by index and by key."""
        assert DEFAULT_CATALOG[0].label == 'idea locked'
        assert DEFAULT_CATALOG[-1].key == 'shared'
        assert DEFAULT_CATALOG.get('deployed').detail == 'live on the internet'
        assert DEFAULT_CATALOG.get('unknown') is None

    def test_len_and_iteration(self):
        assert len(DEFAULT_CATALOG) == 5
        assert [m.key for m in DEFAULT_CATALOG] == DEFAULT_CATALOG.keys()

    def test_duplicate_keys_rejected(self):
        """Duplicate keys would make reconciliation ambiguous."""
        with pytest.raises(ValueError):
            MilestoneCatalog([Milestone('a', 'A', ''), Milestone('a', 'A again', '')])

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError):
            MilestoneCatalog([])

    def test_milestones_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_CATALOG[0].key = 'changed'


class TestComputeCurrentStep:
    """Tests for compute_current_step."""

    def test_first_false_flag_wins(self):
        """[true, true, false, false, false] -> step 3."""
        assert compute_current_step(flags(True, True, False, False, False)) == 3

    def test_nothing_done_is_step_one(self):
        assert compute_current_step(flags(False, False, False, False, False)) == 1

    def test_all_done_is_past_last_step(self):
        """All true -> N + 1."""
        assert compute_current_step(flags(True, True, True, True, True)) == 6

    def test_later_true_does_not_skip_gap(self):
        """A completed later milestone must not advance past an earlier gap."""
        assert compute_current_step(flags(True, False, True, True, True)) == 2

    def test_missing_keys_default_to_incomplete(self):
        assert compute_current_step({}) == 1
        assert compute_current_step({'idea_locked': True}) == 2

    def test_custom_catalog(self):
        catalog = MilestoneCatalog([Milestone(k, k, '') for k in ('A', 'B', 'C')])
        assert compute_current_step({'A': True, 'B': True, 'C': False}, catalog) == 3
        assert compute_current_step({'A': True, 'B': True, 'C': True}, catalog) == 4


class TestProgressView:
    """Tests for the display values derived from the current step."""

    def test_mid_progress(self):
        view = build_progress_view(3)
        assert view.display_step == 3
        assert view.total == 5
        assert view.completed_count == 2
        assert view.percent == 40
        assert view.is_complete is False

    def test_complete_caps_display_step(self):
        """Step N + 1 is shown as 'step N of N' at 100%."""
        view = build_progress_view(6)
        assert view.display_step == 5
        assert view.percent == 100
        assert view.is_complete is True

    def test_percent_rounds_half_up(self):
        """1 of 8 done is 12.5% and rounds to 13."""
        assert ProgressView(current_step=2, total=8).percent == 13

    def test_views_compare_by_value(self):
        assert build_progress_view(2) == build_progress_view(2)
        assert build_progress_view(2) != build_progress_view(3)
