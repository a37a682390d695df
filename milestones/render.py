"""
Text rendering of overlay progress.

render_pill  -> collapsed one-liner: "step 3 of 5 [########------------] 40%"
render_card  -> expanded timeline with one line per milestone
"""
from typing import List

from milestones.catalog import DEFAULT_CATALOG, MilestoneCatalog
from milestones.progress import ProgressView

BAR_WIDTH = 20

MARK_COMPLETED = '●'
MARK_CURRENT = '◉'
MARK_UPCOMING = '○'


def render_bar(percent: int, width: int = BAR_WIDTH) -> str:
    filled = round(width * max(0, min(percent, 100)) / 100)
    return '[' + '#' * filled + '-' * (width - filled) + ']'


def render_pill(view: ProgressView) -> str:
    return f"step {view.display_step} of {view.total} {render_bar(view.percent)} {view.percent}%"


def render_card(view: ProgressView, catalog: MilestoneCatalog = DEFAULT_CATALOG) -> str:
    lines: List[str] = ['your progress', '']

    for index, milestone in enumerate(catalog):
        step = index + 1
        if step < view.current_step:
            mark = MARK_COMPLETED
        elif step == view.current_step:
            mark = MARK_CURRENT
        else:
            mark = MARK_UPCOMING

        label = milestone.label
        if step == view.current_step:
            label += '  [now]'

        lines.append(f"{mark} {label}")
        lines.append(f"    {milestone.detail}")

    lines.append('')
    lines.append(f"{view.percent}% complete {render_bar(view.percent)}")
    return '\n'.join(lines)
