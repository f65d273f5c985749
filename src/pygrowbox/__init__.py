"""pygrowbox - Async Python client for the grow-box controller live dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygrowbox")
except PackageNotFoundError:
    __version__ = "0+local"
from pygrowbox.client import GrowboxDashboard
from pygrowbox.config import GrowboxConfig
from pygrowbox.control.submission import TargetSubmissionController
from pygrowbox.exceptions import (
    GrowboxConfigError,
    GrowboxError,
    GrowboxPayloadError,
    GrowboxSessionError,
    GrowboxTransportError,
)
from pygrowbox.ingestion.bootstrap import BootstrapLoader, BootstrapOutcome
from pygrowbox.ingestion.live import LiveUpdateSubscriber
from pygrowbox.models import (
    DeviceStatusSnapshot,
    Feedback,
    FeedbackKind,
    HumidifierStatus,
    LightStatus,
    SensorSnapshot,
    TargetUpdateRequest,
    TargetUpdateResult,
)
from pygrowbox.state import (
    DashboardView,
    EditableField,
    FieldEditState,
    LoggingRenderer,
    Renderer,
    SnapshotSource,
    ViewReconciler,
)

__all__ = [
    "__version__",
    "BootstrapLoader",
    "BootstrapOutcome",
    "DashboardView",
    "DeviceStatusSnapshot",
    "EditableField",
    "Feedback",
    "FeedbackKind",
    "FieldEditState",
    "GrowboxConfig",
    "GrowboxConfigError",
    "GrowboxDashboard",
    "GrowboxError",
    "GrowboxPayloadError",
    "GrowboxSessionError",
    "GrowboxTransportError",
    "HumidifierStatus",
    "LightStatus",
    "LiveUpdateSubscriber",
    "LoggingRenderer",
    "Renderer",
    "SensorSnapshot",
    "SnapshotSource",
    "TargetSubmissionController",
    "TargetUpdateRequest",
    "TargetUpdateResult",
    "ViewReconciler",
]
