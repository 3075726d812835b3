"""Git-backed package source with a mirror and snapshot cache."""

__version__ = "0.1.0"

from gitsource.errors import (  # noqa: E402
    FormatError,
    GitSourceError,
    NetworkError,
    RevisionNotFoundError,
    ToolMissingError,
    VcsCommandError,
)
from gitsource.model import (  # noqa: E402
    Package,
    PackageId,
    descriptions_equal,
    validate_description,
)
from gitsource.source import GitSource  # noqa: E402

__all__ = [
    "FormatError",
    "GitSource",
    "GitSourceError",
    "NetworkError",
    "Package",
    "PackageId",
    "RevisionNotFoundError",
    "ToolMissingError",
    "VcsCommandError",
    "descriptions_equal",
    "validate_description",
]
