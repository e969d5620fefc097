"""SSH daemon enablement service (macOS remote login)."""

import logging

from sshd_reconcile.exceptions import ExternalToolError, StateQueryError
from sshd_reconcile.models.daemon import DaemonTransition, EnablementIntent, RemoteLoginState
from sshd_reconcile.utils.process import CommandRunner

logger = logging.getLogger("sshd_reconcile")

SSHD_SERVICE = "system/com.openssh.sshd"
SSHD_PLIST = "/System/Library/LaunchDaemons/ssh.plist"
REMOTE_LOGIN_PREFIX = "Remote Login: "


def decide_transition(intent: EnablementIntent, observed: RemoteLoginState) -> DaemonTransition:
    """
    Decide which transition brings the daemon to the declared intent.

    Args:
        intent: Declared intent
        observed: Current remote login state

    Returns:
        Transition to issue, NONE if already satisfied or unmanaged
    """
    if intent == EnablementIntent.UNMANAGED:
        return DaemonTransition.NONE
    if intent == EnablementIntent.ENABLED:
        return DaemonTransition.ENABLE if observed == RemoteLoginState.OFF else DaemonTransition.NONE
    if intent == EnablementIntent.DISABLED:
        return DaemonTransition.DISABLE if observed == RemoteLoginState.ON else DaemonTransition.NONE
    raise ValueError(f"Unhandled enablement intent: {intent!r}")


class DaemonService:
    """Service observing and toggling the sshd launchd job."""

    step_name = "daemon"

    def __init__(
        self,
        runner: CommandRunner,
        systemsetup_path: str = "/usr/sbin/systemsetup",
        launchctl_path: str = "/bin/launchctl",
    ):
        """
        Initialize daemon service.

        Args:
            runner: Process invocation primitive
            systemsetup_path: Path to systemsetup, used only for the state query
            launchctl_path: Path to launchctl

        Note:
            `systemsetup -setremotelogin` requires Full Disk Access, so
            transitions go through launchctl instead.
        """
        self.runner = runner
        self.systemsetup_path = systemsetup_path
        self.launchctl_path = launchctl_path

    def query_state(self) -> RemoteLoginState:
        """
        Read the current remote login state.

        Returns:
            Observed state

        Raises:
            StateQueryError: If the state cannot be determined
        """
        args = [self.systemsetup_path, "-getremotelogin"]
        try:
            result = self.runner.run(args, mutating=False, entity=SSHD_SERVICE)
        except ExternalToolError as e:
            raise StateQueryError(f"Cannot query remote login state: {e.message}", entity=SSHD_SERVICE) from e

        output = (result.stdout or "").strip()
        value = output[len(REMOTE_LOGIN_PREFIX) :] if output.startswith(REMOTE_LOGIN_PREFIX) else output

        for state in RemoteLoginState:
            if value == state.value:
                logger.debug(f"Remote login is {state.value}")
                return state

        raise StateQueryError(f"Unrecognised remote login state: {output!r}", entity=SSHD_SERVICE)

    def enable_commands(self) -> list[list[str]]:
        """Commands enabling and starting sshd, in order."""
        return [
            [self.launchctl_path, "enable", SSHD_SERVICE],
            [self.launchctl_path, "bootstrap", "system", SSHD_PLIST],
        ]

    def disable_commands(self) -> list[list[str]]:
        """Commands stopping and disabling sshd, in order."""
        return [
            [self.launchctl_path, "bootout", SSHD_SERVICE],
            [self.launchctl_path, "disable", SSHD_SERVICE],
        ]

    def reconcile(self, intent: EnablementIntent) -> DaemonTransition:
        """
        Bring the daemon to the declared intent.

        The state is queried fresh on every call. Unmanaged intent issues no
        query and no command.

        Args:
            intent: Declared intent

        Returns:
            Transition that was issued

        Raises:
            StateQueryError: If the current state cannot be determined
            ExternalToolError: If a transition command fails
        """
        if intent == EnablementIntent.UNMANAGED:
            logger.debug("Remote login is unmanaged, leaving daemon state alone")
            return DaemonTransition.NONE

        observed = self.query_state()
        transition = decide_transition(intent, observed)

        if transition == DaemonTransition.ENABLE:
            commands = self.enable_commands()
        elif transition == DaemonTransition.DISABLE:
            commands = self.disable_commands()
        else:
            logger.info(f"Remote login already {observed.value}, nothing to do")
            return transition

        for args in commands:
            self.runner.run(args, entity=SSHD_SERVICE)

        logger.info(f"Remote login transition issued: {transition.value}")
        return transition
