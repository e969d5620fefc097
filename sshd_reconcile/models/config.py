"""Application configuration models."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .daemon import EnablementIntent
from .host_key import DEFAULT_HOST_KEYS, HostKeySpec, parse_host_keys


class OpenSSHSettings(BaseModel):
    """Declared SSH server state."""

    enable: EnablementIntent = EnablementIntent.UNMANAGED
    generate_host_keys: bool = False
    extra_config: str = ""
    host_keys: list[HostKeySpec] = Field(default_factory=lambda: list(DEFAULT_HOST_KEYS))

    @field_validator("enable", mode="before")
    @classmethod
    def convert_enable(cls, v):
        """Accept null/true/false as well as intent names."""
        return EnablementIntent.from_option(v)

    @field_validator("extra_config", mode="before")
    @classmethod
    def convert_extra_config(cls, v):
        """Treat a null extra_config as empty text."""
        if v is None:
            return ""
        return v

    @field_validator("host_keys", mode="before")
    @classmethod
    def convert_host_keys(cls, v: Any):
        """Run the host key construction step on raw option data."""
        if isinstance(v, list) and all(isinstance(item, HostKeySpec) for item in v):
            return v
        return parse_host_keys(v)


class PathSettings(BaseModel):
    """Path settings."""

    sshd_config_dir: str = "/etc/ssh/sshd_config.d"
    ssh_keygen: Optional[str] = None  # None resolves ssh-keygen from PATH
    systemsetup: str = "/usr/sbin/systemsetup"
    launchctl: str = "/bin/launchctl"


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


class AppConfig(BaseModel):
    """Main application configuration."""

    openssh: OpenSSHSettings = Field(default_factory=OpenSSHSettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
