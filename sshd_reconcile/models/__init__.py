"""Data models for sshd reconciliation."""

from .config import AppConfig, LoggingSettings, OpenSSHSettings, PathSettings
from .daemon import DaemonTransition, EnablementIntent, RemoteLoginState
from .host_key import (
    DEFAULT_HOST_KEYS,
    HostKeySpec,
    HostKeyType,
    build_host_key_spec,
    duplicate_paths,
    parse_host_keys,
)
from .report import MaterializeResult, ReconcileReport, RenderedFragments, StepFailure

__all__ = [
    "HostKeyType",
    "HostKeySpec",
    "DEFAULT_HOST_KEYS",
    "build_host_key_spec",
    "duplicate_paths",
    "parse_host_keys",
    "EnablementIntent",
    "RemoteLoginState",
    "DaemonTransition",
    "RenderedFragments",
    "MaterializeResult",
    "StepFailure",
    "ReconcileReport",
    "AppConfig",
    "OpenSSHSettings",
    "PathSettings",
    "LoggingSettings",
]
