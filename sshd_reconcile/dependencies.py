"""Configuration loading and service wiring."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from sshd_reconcile.exceptions import ConfigError
from sshd_reconcile.models.config import AppConfig
from sshd_reconcile.models.host_key import parse_host_keys
from sshd_reconcile.services.daemon_service import DaemonService
from sshd_reconcile.services.fragment_service import FragmentService
from sshd_reconcile.services.keygen_service import KeygenService
from sshd_reconcile.services.materializer_service import HostKeyMaterializer
from sshd_reconcile.services.reconcile_service import ReconcileService
from sshd_reconcile.services.yaml_service import YAMLService
from sshd_reconcile.utils.process import CommandRunner

logger = logging.getLogger("sshd_reconcile")

DEFAULT_CONFIG_PATH = Path("config.yaml")


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """
    Load and validate application configuration.

    Args:
        config_path: Path to config.yaml

    Returns:
        Application configuration

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
        HostKeyValidationError: If a host key declaration is malformed
    """
    try:
        config_data = YAMLService.load_yaml(config_path)
    except FileNotFoundError as e:
        raise ConfigError(str(e), entity=str(config_path)) from e
    except (yaml.YAMLError, ValueError, OSError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}", entity=str(config_path)) from e

    # Host keys go through their own construction step so errors name the entry
    openssh = config_data.get("openssh")
    if isinstance(openssh, dict) and "host_keys" in openssh:
        openssh = dict(openssh)
        openssh["host_keys"] = parse_host_keys(openssh["host_keys"])
        config_data = {**config_data, "openssh": openssh}

    try:
        return AppConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}", entity=str(config_path)) from e


def get_runner(dry_run: bool = False) -> CommandRunner:
    """
    Get process runner.

    Args:
        dry_run: Log mutating commands instead of running them

    Returns:
        Command runner
    """
    return CommandRunner(dry_run=dry_run)


def get_reconcile_service(config: AppConfig, runner: CommandRunner) -> ReconcileService:
    """
    Get reconcile service wired from configuration.

    Args:
        config: Application configuration
        runner: Process runner shared by all external invocations

    Returns:
        Reconcile service
    """
    fragment_service = FragmentService(Path(config.paths.sshd_config_dir), dry_run=runner.dry_run)
    keygen_service = KeygenService(runner, ssh_keygen_path=config.paths.ssh_keygen)
    daemon_service = DaemonService(
        runner,
        systemsetup_path=config.paths.systemsetup,
        launchctl_path=config.paths.launchctl,
    )
    return ReconcileService(fragment_service, HostKeyMaterializer(keygen_service), daemon_service)
