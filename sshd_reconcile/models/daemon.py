"""Daemon enablement models."""

from enum import Enum
from typing import Union


class EnablementIntent(str, Enum):
    """Declared on/off intent for the SSH daemon."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    UNMANAGED = "unmanaged"

    @classmethod
    def from_option(cls, value: Union[None, bool, str, "EnablementIntent"]) -> "EnablementIntent":
        """
        Map a tri-state option value to an intent.

        None means "let macOS manage the daemon", which is not the same as False.

        Args:
            value: None, a bool, or an intent name/value

        Returns:
            Matching intent

        Raises:
            ValueError: If value is not recognised
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNMANAGED
        if value is True:
            return cls.ENABLED
        if value is False:
            return cls.DISABLED
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if normalized in (member.value, member.name.lower()):
                    return member
        raise ValueError(f"Invalid enablement intent: {value!r}")


class RemoteLoginState(str, Enum):
    """Observed remote login state as reported by systemsetup."""

    ON = "On"
    OFF = "Off"


class DaemonTransition(str, Enum):
    """Action chosen by the enablement state machine."""

    NONE = "none"
    ENABLE = "enable"
    DISABLE = "disable"
