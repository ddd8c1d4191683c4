"""Hand the terminal over to the system ssh client."""

from __future__ import annotations

import os
import sys

from .exceptions import SSHLaunchError

SSH_BINARY = "ssh"


def exec_ssh(login: str) -> None:
    """Replace the current process with ``ssh <login>``. Does not return on success."""
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        os.execvp(SSH_BINARY, [SSH_BINARY, login])
    except OSError as exc:
        raise SSHLaunchError(f"cannot run {SSH_BINARY}: {exc}") from exc
