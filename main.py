"""sshd-reconcile entry point."""

import sys

from sshd_reconcile.cli import main

if __name__ == "__main__":
    sys.exit(main())
