"""Activation: runs the fragment, host key and daemon steps."""

import logging
from datetime import datetime

from sshd_reconcile.exceptions import ReconcileError
from sshd_reconcile.models.config import OpenSSHSettings
from sshd_reconcile.models.host_key import duplicate_paths
from sshd_reconcile.models.report import ReconcileReport, StepFailure
from sshd_reconcile.services.daemon_service import DaemonService
from sshd_reconcile.services.fragment_service import FragmentService
from sshd_reconcile.services.materializer_service import HostKeyMaterializer

logger = logging.getLogger("sshd_reconcile")


class ReconcileService:
    """Service reconciling declared SSH server state with the host."""

    def __init__(
        self,
        fragment_service: FragmentService,
        materializer: HostKeyMaterializer,
        daemon_service: DaemonService,
    ):
        """
        Initialize reconcile service.

        Args:
            fragment_service: Config fragment renderer/writer
            materializer: Host key materializer
            daemon_service: Daemon enablement state machine
        """
        self.fragment_service = fragment_service
        self.materializer = materializer
        self.daemon_service = daemon_service

    def reconcile(self, settings: OpenSSHSettings, dry_run: bool = False) -> ReconcileReport:
        """
        Run all activation steps.

        The steps share no state; a failure in one is recorded and the others
        still run. Nothing is rolled back, the next run completes the work.

        Args:
            settings: Declared SSH server state
            dry_run: Whether the collaborators only log their actions

        Returns:
            Report with per-step outcomes and structured failures
        """
        report = ReconcileReport(dry_run=dry_run)
        logger.info(
            f"Reconciling sshd: {len(settings.host_keys)} host key(s), "
            f"generate={settings.generate_host_keys}, enable={settings.enable.value}"
        )
        for path in duplicate_paths(settings.host_keys):
            # Same-path entries share one key file; the first one generates it
            logger.warning(f"Host key path declared more than once: {path}")

        self._run_fragments(settings, report)

        if settings.generate_host_keys:
            result = self.materializer.materialize(settings.host_keys)
            report.host_keys = result
            report.failures.extend(result.failures)
        else:
            logger.debug("Host key generation disabled, assuming declared keys exist")

        self._run_daemon(settings, report)

        report.finished_at = datetime.now()
        if report.ok:
            logger.info("Reconciliation completed")
        else:
            logger.error(f"Reconciliation finished with {len(report.failures)} failure(s)")
        return report

    def _run_fragments(self, settings: OpenSSHSettings, report: ReconcileReport) -> None:
        fragments = self.fragment_service.render(settings.host_keys, settings.extra_config)
        try:
            written, removed = self.fragment_service.write(fragments)
        except ReconcileError as e:
            logger.error(f"Failed to write config fragments: {e.message}")
            report.failures.append(StepFailure.from_error("fragments", e))
            return
        report.fragments_written = written
        report.fragments_removed = removed

    def _run_daemon(self, settings: OpenSSHSettings, report: ReconcileReport) -> None:
        try:
            report.daemon_transition = self.daemon_service.reconcile(settings.enable)
        except ReconcileError as e:
            logger.error(f"Failed to reconcile remote login: {e.message}")
            report.failures.append(StepFailure.from_error(self.daemon_service.step_name, e))
