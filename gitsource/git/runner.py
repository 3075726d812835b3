"""
Thin wrapper around the git executable.

All git invocations of the package go through ``GitRunner.run`` so that
failures are translated into the package's error taxonomy in a single place
and tests can substitute an in-memory runner.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

# GitPython refuses to import when git is missing unless told otherwise. A
# missing executable is reported through ToolMissingError instead, and the
# override is only in effect while GitPython initializes.
_refresh_mode = os.environ.get("GIT_PYTHON_REFRESH")
if _refresh_mode is None:
    os.environ["GIT_PYTHON_REFRESH"] = "quiet"
try:
    from git import Git
    from git.exc import GitCommandError, GitCommandNotFound
finally:
    if _refresh_mode is None:
        del os.environ["GIT_PYTHON_REFRESH"]

from gitsource.errors import (  # noqa: E402
    NetworkError,
    ToolMissingError,
    VcsCommandError,
)

logger = logging.getLogger(__name__)

# Never block on a credential prompt: authentication is out of our hands.
_GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}

_NETWORK_FAILURE_PATTERNS = re.compile(
    r"could not resolve host"
    r"|unable to access"
    r"|could not read from remote repository"
    r"|connection (refused|timed out|reset)"
    r"|network is unreachable"
    r"|failed to connect"
    r"|the remote end hung up",
    re.IGNORECASE,
)

_STDERR_WRAPPER = re.compile(r"^\s*stderr: '(.*)'\s*$", re.DOTALL)


def is_network_failure(stderr: str) -> bool:
    """Tell whether git's stderr describes a transport failure."""
    return bool(_NETWORK_FAILURE_PATTERNS.search(stderr or ""))


def _clean_stderr(stderr) -> str:
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    stderr = stderr or ""
    match = _STDERR_WRAPPER.match(stderr)
    return match.group(1) if match else stderr


class GitRunner:
    """Runs git commands, blocking until they finish."""

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def is_available(self) -> bool:
        try:
            Git().execute([self.executable, "--version"], env=_GIT_ENV)
        except (GitCommandNotFound, GitCommandError, OSError) as e:
            logger.debug(f"git is not available: {e}")
            return False
        return True

    def run(
        self,
        args: Sequence[str],
        working_dir: Optional[Union[str, Path]] = None,
    ) -> List[str]:
        """
        Run ``git <args>`` and return its standard output as lines.

        Args:
            args: Arguments passed to git
            working_dir: Directory to run in (defaults to the current one)

        Raises:
            ToolMissingError: if the git executable cannot be started
            NetworkError: if the command failed to reach a remote
            VcsCommandError: for any other non-zero exit
        """
        args = [str(arg) for arg in args]
        cwd = str(working_dir) if working_dir is not None else None
        logger.debug(f"Running git {' '.join(args)} in {cwd or os.getcwd()}")

        try:
            output = Git(cwd).execute([self.executable, *args], env=_GIT_ENV)
        except GitCommandNotFound as e:
            raise ToolMissingError(
                f"Could not run '{self.executable}'. "
                "Please ensure Git is correctly installed."
            ) from e
        except GitCommandError as e:
            stderr = _clean_stderr(e.stderr)
            error_cls = NetworkError if is_network_failure(stderr) else VcsCommandError
            raise error_cls(args, e.status, stderr) from e

        return output.splitlines()
