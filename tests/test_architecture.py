"""
Architecture tests.

Verifies:
1. No module-level engine singletons (retained state must be per runtime)
2. Import safety (no polling, logging setup or I/O at import time)
"""
import ast
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

STATEFUL_CLASSES = {'StateReconciler', 'ProgressPoller', 'TelemetryDispatcher', 'OverlayRuntime'}

MODULES = [
    'core.config',
    'core.error_boundary',
    'core.logging',
    'core.runtime',
    'integrations.forms.client',
    'integrations.identity.client',
    'milestones.catalog',
    'milestones.progress',
    'milestones.reconciler',
    'milestones.render',
    'milestones.snapshot',
    'milestones.telemetry',
    'scheduler.poller',
    'progress_overlay',
]


def module_path(module_name: str) -> Path:
    return PROJECT_ROOT / (module_name.replace('.', '/') + '.py')


class TestNoGlobalSingletons:
    """Stateful engine pieces are only ever built by OverlayRuntime."""

    @pytest.mark.parametrize('module_name', MODULES)
    def test_no_module_level_stateful_instances(self, module_name):
        tree = ast.parse(module_path(module_name).read_text())

        offenders = []
        for node in tree.body:
            if isinstance(node, ast.Assign) and isinstance(node.value, ast.Call):
                func = node.value.func
                name = getattr(func, 'id', None) or getattr(func, 'attr', None)
                if name in STATEFUL_CLASSES:
                    offenders.append(name)

        assert offenders == [], f"{module_name} builds {offenders} at import time"


class TestImportSafety:
    """Modules import cleanly and expose their entry points without side effects."""

    def test_runtime_import_safety(self):
        from core.runtime import OverlayRuntime, OverlayDisabledError
        assert OverlayRuntime is not None
        assert OverlayDisabledError is not None

    def test_scheduler_import_safety(self):
        from scheduler import ProgressPoller, PollHandle, CycleResult
        assert ProgressPoller is not None
        assert PollHandle is not None
        assert CycleResult is not None

    def test_cli_import_safety(self):
        """Importing the CLI must not start polling or configure logging."""
        import core.logging as overlay_logging
        import progress_overlay

        assert hasattr(progress_overlay, 'main')
        assert hasattr(progress_overlay, 'run')
        assert overlay_logging._configured is False
