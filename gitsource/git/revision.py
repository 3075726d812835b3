"""Resolution of refs to commit hashes against a repository mirror."""

import logging
from pathlib import Path

from gitsource.errors import RevisionNotFoundError, VcsCommandError
from gitsource.model.description import BareDescription, Description, GitDescription

logger = logging.getLogger(__name__)

DEFAULT_REF = "HEAD"


def effective_ref(description: Description) -> str:
    """
    Return the ref that should be resolved for ``description``.

    A ``resolved-ref`` written by a previous resolution wins over the requested
    ``ref``; without either the repository's default branch (``HEAD``) is used.
    """
    match description:
        case GitDescription(resolved_ref=str() as resolved):
            return resolved
        case GitDescription(ref=str() as ref):
            return ref
        case GitDescription() | BareDescription():
            return DEFAULT_REF


def rev_parse(runner, mirror_path: Path, ref: str, url: str) -> str:
    """Resolve ``ref`` to a full commit hash in the mirror at ``mirror_path``."""
    try:
        lines = runner.run(
            ["rev-parse", "--verify", f"{ref}^{{commit}}"], working_dir=mirror_path
        )
    except VcsCommandError as e:
        raise RevisionNotFoundError(ref, url) from e
    if not lines or not lines[0].strip():
        raise RevisionNotFoundError(ref, url)
    commit = lines[0].strip()
    logger.debug(f"Resolved {url}@{ref} to {commit}")
    return commit


def resolve_revision(runner, mirror_path: Path, description: Description) -> str:
    """
    Return the commit hash ``description`` points to.

    Pinned descriptions return their ``resolved-ref`` without reading the
    mirror. Otherwise this is a read-only query; callers fetch the mirror
    first when they need fresh refs.

    Raises:
        RevisionNotFoundError: if the ref does not exist in the mirror
    """
    match description:
        case GitDescription(resolved_ref=str() as resolved):
            return resolved
        case _:
            ref = effective_ref(description)
            if not mirror_path.exists():
                raise RevisionNotFoundError(ref, description.url)
            return rev_parse(runner, mirror_path, ref, description.url)


def has_commit(runner, mirror_path: Path, commit: str) -> bool:
    """Tell whether ``commit`` is present in the mirror at ``mirror_path``."""
    try:
        runner.run(["cat-file", "-e", f"{commit}^{{commit}}"], working_dir=mirror_path)
    except VcsCommandError:
        return False
    return True
