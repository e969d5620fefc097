"""End-to-end tests for the reconcile service."""

import logging

import pytest

from sshd_reconcile.models.config import OpenSSHSettings
from sshd_reconcile.models.daemon import DaemonTransition, EnablementIntent
from sshd_reconcile.models.host_key import DEFAULT_HOST_KEYS, HostKeySpec, HostKeyType
from sshd_reconcile.services.daemon_service import DaemonService
from sshd_reconcile.services.fragment_service import EXTRA_FRAGMENT, HOST_KEYS_FRAGMENT, FragmentService
from sshd_reconcile.services.keygen_service import KeygenService
from sshd_reconcile.services.materializer_service import HostKeyMaterializer
from sshd_reconcile.services.reconcile_service import ReconcileService


def _call_text(call):
    return " ".join(call)


@pytest.mark.integration
class TestReconcile:
    """Test full reconciliation runs against a fake root."""

    def test_custom_host_keys_scenario(self, reconcile_service, runner, config_dir, sample_host_keys):
        """Test fragments, key generation and daemon enablement for the custom key example."""
        settings = OpenSSHSettings(
            enable=EnablementIntent.ENABLED,
            generate_host_keys=True,
            extra_config="StreamLocalBindUnlink yes",
            host_keys=sample_host_keys,
        )

        report = reconcile_service.reconcile(settings)

        assert report.ok
        host_keys_text = (config_dir / HOST_KEYS_FRAGMENT).read_text()
        assert host_keys_text.splitlines() == [f"HostKey {k.path}" for k in sample_host_keys]
        for default in DEFAULT_HOST_KEYS:
            assert f"HostKey {default.path}\n" not in host_keys_text + "\n"
        assert (config_dir / EXTRA_FRAGMENT).read_text() == "StreamLocalBindUnlink yes"

        ed25519_call, rsa_call = (_call_text(c) for c in runner.keygen_calls)
        assert "-t ed25519" in ed25519_call
        assert "-C my-host" in ed25519_call
        assert ed25519_call.index("-t ed25519") < ed25519_call.index("-C my-host") < ed25519_call.index("-f ")
        assert ed25519_call.endswith(f"-f {sample_host_keys[0].path} -N ")
        assert "-t rsa -b 4096" in rsa_call
        assert f"-f {sample_host_keys[1].path}" in rsa_call

        assert report.daemon_transition == DaemonTransition.ENABLE
        assert report.host_keys.generated == [k.path for k in sample_host_keys]

    def test_second_run_only_rewrites_fragments(self, reconcile_service, runner, sample_host_keys):
        """Test a re-run with unchanged input issues no keygen or transition."""
        settings = OpenSSHSettings(enable=EnablementIntent.ENABLED, generate_host_keys=True, host_keys=sample_host_keys)
        reconcile_service.reconcile(settings)
        runner.remote_login = "On"

        report = reconcile_service.reconcile(settings)

        assert report.ok
        assert len(runner.keygen_calls) == 2
        assert len(runner.launchctl_calls) == 2
        assert report.daemon_transition == DaemonTransition.NONE
        assert report.host_keys.present == [k.path for k in sample_host_keys]

    def test_generation_disabled_skips_materializer(self, reconcile_service, runner, sample_host_keys):
        """Test declared keys are assumed present when generation is off."""
        settings = OpenSSHSettings(host_keys=sample_host_keys)

        report = reconcile_service.reconcile(settings)

        assert report.host_keys is None
        assert runner.calls == []

    def test_defaults_write_fragments_only(self, reconcile_service, runner, config_dir):
        """Test default settings leave daemon and keys to macOS."""
        report = reconcile_service.reconcile(OpenSSHSettings())

        assert report.ok
        assert runner.calls == []
        assert (config_dir / HOST_KEYS_FRAGMENT).read_text().splitlines() == [
            "HostKey /etc/ssh/ssh_host_rsa_key",
            "HostKey /etc/ssh/ssh_host_ecdsa_key",
            "HostKey /etc/ssh/ssh_host_ed25519_key",
        ]
        assert (config_dir / EXTRA_FRAGMENT).read_text() == ""

    def test_failures_are_isolated_per_step(self, make_runner, root_dir, sample_host_keys):
        """Test a key failure and a daemon failure are both reported and fragments still written."""
        runner = make_runner(fail_on={"rsa", "-getremotelogin"})
        config_dir = root_dir / "etc" / "ssh" / "sshd_config.d"
        service = ReconcileService(
            FragmentService(config_dir),
            HostKeyMaterializer(KeygenService(runner, ssh_keygen_path="ssh-keygen")),
            DaemonService(runner),
        )
        settings = OpenSSHSettings(
            enable=EnablementIntent.DISABLED, generate_host_keys=True, host_keys=sample_host_keys
        )

        report = service.reconcile(settings)

        assert not report.ok
        assert [(f.step, f.kind) for f in report.failures] == [
            ("host_keys", "external_tool_error"),
            ("daemon", "state_query_error"),
        ]
        assert report.failures[0].entity == sample_host_keys[1].path
        assert report.host_keys.generated == [sample_host_keys[0].path]
        assert report.daemon_transition is None
        assert (config_dir / HOST_KEYS_FRAGMENT).exists()
        assert runner.launchctl_calls == []

    def test_fragment_failure_does_not_block_other_steps(self, make_runner, root_dir, sample_host_keys):
        """Test an unwritable config dir is reported while keys are still generated."""
        runner = make_runner()
        blocker = root_dir / "blocker"
        blocker.write_text("x")
        service = ReconcileService(
            FragmentService(blocker / "sshd_config.d"),
            HostKeyMaterializer(KeygenService(runner, ssh_keygen_path="ssh-keygen")),
            DaemonService(runner),
        )

        report = service.reconcile(OpenSSHSettings(generate_host_keys=True, host_keys=sample_host_keys))

        assert [f.step for f in report.failures] == ["fragments"]
        assert report.failures[0].kind == "filesystem_error"
        assert len(runner.keygen_calls) == 2

    def test_filesystem_error_on_key_path_does_not_abort_run(self, reconcile_service, runner, root_dir):
        """Test an OS error on one key path is reported and the daemon step still runs."""
        too_long = str(root_dir / ("a" * 300))
        settings = OpenSSHSettings(
            enable=EnablementIntent.ENABLED,
            generate_host_keys=True,
            host_keys=[HostKeySpec(type=HostKeyType.RSA, path=too_long)],
        )

        report = reconcile_service.reconcile(settings)

        assert not report.ok
        assert [(f.step, f.kind, f.entity) for f in report.failures] == [("host_keys", "filesystem_error", too_long)]
        assert report.daemon_transition == DaemonTransition.ENABLE
        assert len(runner.launchctl_calls) == 2

    def test_duplicate_paths_warned(self, reconcile_service, root_dir, caplog):
        """Test a repeated key path is logged once per run."""
        path = str(root_dir / "dup_key")
        settings = OpenSSHSettings(
            host_keys=[HostKeySpec(type=HostKeyType.RSA, path=path), HostKeySpec(type=HostKeyType.ED25519, path=path)]
        )

        with caplog.at_level(logging.WARNING, logger="sshd_reconcile"):
            report = reconcile_service.reconcile(settings)

        assert report.ok
        assert caplog.text.count(f"declared more than once: {path}") == 1

    def test_empty_host_keys_removes_fragment(self, reconcile_service, config_dir, sample_host_keys):
        """Test clearing the declaration removes previously written directives."""
        reconcile_service.reconcile(OpenSSHSettings(host_keys=sample_host_keys, extra_config="Port 2222"))

        report = reconcile_service.reconcile(OpenSSHSettings(host_keys=[]))

        assert report.fragments_removed == [str(config_dir / HOST_KEYS_FRAGMENT)]
        assert not (config_dir / HOST_KEYS_FRAGMENT).exists()
        assert (config_dir / EXTRA_FRAGMENT).read_text() == ""
