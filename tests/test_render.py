"""
Tests for text rendering of progress.
"""
from milestones.progress import build_progress_view
from milestones.render import MARK_COMPLETED, MARK_CURRENT, MARK_UPCOMING, render_bar, render_card, render_pill


class TestRenderPill:

    def test_mid_progress(self):
        assert render_pill(build_progress_view(3)) == 'step 3 of 5 [########------------] 40%'

    def test_complete(self):
        """Past the last step still reads 'step 5 of 5'."""
        assert render_pill(build_progress_view(6)) == 'step 5 of 5 [####################] 100%'

    def test_bar_clamps(self):
        assert render_bar(150, width=4) == '[####]'
        assert render_bar(-10, width=4) == '[----]'


class TestRenderCard:

    def test_markers_follow_step(self):
        card = render_card(build_progress_view(2))
        lines = card.splitlines()

        assert lines[0] == 'your progress'
        assert f'{MARK_COMPLETED} idea locked' in lines
        assert f'{MARK_CURRENT} first screen  [now]' in lines
        assert f'{MARK_UPCOMING} shared' in lines
        assert '    something real on the page' in lines
        assert lines[-1].startswith('20% complete')

    def test_all_complete_has_no_current(self):
        card = render_card(build_progress_view(6))
        assert '[now]' not in card
        assert card.count(MARK_COMPLETED) == 5
