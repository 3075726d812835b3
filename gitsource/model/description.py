"""
Package descriptions for git dependencies.

A description is what a user writes to depend on a git repository. It comes
in two shapes:

    some_package: https://github.com/user/repo.git          # bare URL

    some_package:                                           # mapping
      url: https://github.com/user/repo.git
      ref: v1.2.0

Lock files additionally carry ``resolved-ref``, the commit hash the ref pointed
to when the lock was written. Both shapes parse into a small tagged variant,
``BareDescription`` or ``GitDescription``, which the rest of the package
dispatches on with ``match``.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from gitsource.errors import FormatError
from gitsource.git.keys import normalize_url

URL_KEY = "url"
REF_KEY = "ref"
RESOLVED_REF_KEY = "resolved-ref"


def _non_empty(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must be a non-empty string")
    return value


class BareDescription(BaseModel):
    """A description given as a plain repository URL."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Repository URL")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _non_empty(v)

    @property
    def ref(self) -> Optional[str]:
        return None

    @property
    def resolved_ref(self) -> Optional[str]:
        return None

    def to_raw(self) -> str:
        return self.url


class GitDescription(BaseModel):
    """A description given as a mapping with a URL and optional refs."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    url: str = Field(..., description="Repository URL")
    ref: Optional[str] = Field(None, description="Branch, tag or commit-ish")
    resolved_ref: Optional[str] = Field(
        None,
        alias=RESOLVED_REF_KEY,
        description="Commit hash pinned by a previous resolution",
    )

    @field_validator("url", "ref", "resolved_ref")
    @classmethod
    def validate_strings(cls, v: Optional[str]) -> Optional[str]:
        return _non_empty(v)

    def to_raw(self) -> dict:
        raw = {URL_KEY: self.url}
        if self.ref is not None:
            raw[REF_KEY] = self.ref
        if self.resolved_ref is not None:
            raw[RESOLVED_REF_KEY] = self.resolved_ref
        return raw


Description = Union[BareDescription, GitDescription]


def validate_description(raw: Any, from_lock_file: bool = False) -> None:
    """
    Ensure ``raw`` is a git URL or a mapping with a ``url`` key.

    ``resolved-ref`` is only accepted when the description was read back from
    a lock file.

    Raises:
        FormatError: naming the offending keys when the mapping has extras
    """
    if isinstance(raw, str):
        return
    if not isinstance(raw, dict) or URL_KEY not in raw:
        raise FormatError(
            "The description must be a Git URL or a map with a 'url' key."
        )

    allowed = {URL_KEY, REF_KEY}
    if from_lock_file:
        allowed.add(RESOLVED_REF_KEY)
    extra = sorted(str(key) for key in raw if key not in allowed)
    if extra:
        plural = "s" if len(extra) > 1 else ""
        raise FormatError(f"Invalid key{plural}: {', '.join(extra)}.")

    for key in (URL_KEY, REF_KEY, RESOLVED_REF_KEY):
        value = raw.get(key)
        if key in raw and (not isinstance(value, str) or not value.strip()):
            raise FormatError(f"The '{key}' of a git description must be a string.")


def parse_description(raw: Any, from_lock_file: bool = False) -> Description:
    """Validate ``raw`` and build the matching description variant."""
    if isinstance(raw, (BareDescription, GitDescription)):
        return raw

    validate_description(raw, from_lock_file=from_lock_file)
    try:
        if isinstance(raw, str):
            return BareDescription(url=raw)
        return GitDescription.model_validate(raw)
    except PydanticValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(part) for part in error.get("loc", ()))
        raise FormatError(
            f"Invalid git description ({location}): {error.get('msg', str(e))}"
        ) from e


def pin(description: Description, commit: str) -> GitDescription:
    """Return a copy of ``description`` with ``resolved-ref`` set to ``commit``."""
    match description:
        case BareDescription():
            return GitDescription(url=description.url, resolved_ref=commit)
        case GitDescription():
            return GitDescription(
                url=description.url, ref=description.ref, resolved_ref=commit
            )


def descriptions_equal(description1: Any, description2: Any) -> bool:
    """
    Two git descriptions are equal if both their URLs and their refs are equal.

    ``resolved-ref`` is not compared, so lock entries pinned to different
    commits of the same branch name the same dependency.
    Accepts raw values, parsed descriptions or package ids.
    """
    d1 = _as_description(description1)
    d2 = _as_description(description2)
    return normalize_url(d1.url) == normalize_url(d2.url) and d1.ref == d2.ref


def _as_description(value: Any) -> Description:
    # Avoid a circular import: package.py depends on this module.
    from gitsource.model.package import PackageId

    if isinstance(value, PackageId):
        value = value.description
    return parse_description(value, from_lock_file=True)
