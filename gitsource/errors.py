"""
Exception classes for the git package source.
"""

from typing import Optional, Sequence


class GitSourceError(Exception):
    """Base exception for all git source errors."""

    pass


class FormatError(GitSourceError, ValueError):
    """Raised when a package description or lock file is malformed."""

    pass


class ToolMissingError(GitSourceError):
    """Raised when the git executable cannot be found."""

    pass


class VcsCommandError(GitSourceError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        status: Optional[int] = None,
        stderr: str = "",
    ):
        self.command = list(command)
        self.status = status
        self.stderr = stderr.strip()
        message = f"Git command failed: git {' '.join(self.command)}"
        if status is not None:
            message += f" (exit code {status})"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)


class NetworkError(VcsCommandError):
    """Raised when a clone or fetch fails to reach the remote."""

    pass


class RevisionNotFoundError(GitSourceError):
    """Raised when a ref cannot be resolved in a repository mirror."""

    def __init__(self, ref: str, url: str):
        self.ref = ref
        self.url = url
        super().__init__(
            f"Reference '{ref}' not found in repository {url}. "
            "Check the ref for typos or fetch the repository again."
        )
