"""
Milestones package - the state side of the progress overlay.

- catalog: ordered milestone definitions
- snapshot: status document fetching and normalization
- progress: current-step computation
- reconciler: newly-completed detection with first-tick suppression
- telemetry: fire-and-forget notification of completed milestones
- render: text rendering of progress
"""
from milestones.catalog import DEFAULT_CATALOG, Milestone, MilestoneCatalog
from milestones.progress import ProgressView, build_progress_view, compute_current_step
from milestones.reconciler import StateReconciler
from milestones.snapshot import Snapshot, SnapshotFetcher, SnapshotUnavailableError, normalize_snapshot
from milestones.telemetry import TelemetryDispatcher

__all__ = [
    'DEFAULT_CATALOG',
    'Milestone',
    'MilestoneCatalog',
    'ProgressView',
    'Snapshot',
    'SnapshotFetcher',
    'SnapshotUnavailableError',
    'StateReconciler',
    'TelemetryDispatcher',
    'build_progress_view',
    'compute_current_step',
    'normalize_snapshot',
]
