"""State layer.

This package is the single source of truth for how snapshots from the
bootstrap fetches and the push channel are merged into the dashboard
view, and for the operator's edit state of the target form.
"""

from pygrowbox.state.events import SnapshotKind, SnapshotRecord, SnapshotSource
from pygrowbox.state.form import EditableField, FieldEditState, FormField
from pygrowbox.state.reconciler import (
    DashboardView,
    LoggingRenderer,
    Renderer,
    SensorView,
    StatusView,
    ViewReconciler,
)

__all__ = [
    "DashboardView",
    "EditableField",
    "FieldEditState",
    "FormField",
    "LoggingRenderer",
    "Renderer",
    "SensorView",
    "SnapshotKind",
    "SnapshotRecord",
    "SnapshotSource",
    "StatusView",
    "ViewReconciler",
]
