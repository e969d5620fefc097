"""Declarative reconciliation of sshd host keys, config fragments and remote login state."""

__version__ = "1.0.0"
