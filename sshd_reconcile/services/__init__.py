"""Service layer for reconciliation logic."""

from .daemon_service import DaemonService, decide_transition
from .fragment_service import FragmentService
from .keygen_service import KeygenService
from .materializer_service import HostKeyMaterializer
from .reconcile_service import ReconcileService
from .yaml_service import YAMLService

__all__ = [
    "YAMLService",
    "KeygenService",
    "FragmentService",
    "HostKeyMaterializer",
    "DaemonService",
    "decide_transition",
    "ReconcileService",
]
