"""Package identities and installed package handles."""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gitsource.git.keys import check_package_name
from gitsource.model.description import Description, parse_description

GIT_SOURCE_NAME = "git"


class PackageId(BaseModel):
    """
    Identifies one dependency as resolved by the dependency manager.

    ``description`` holds the persisted form (a URL string or a mapping), the
    same value that is written to lock files.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Package name")
    version: Optional[str] = Field(None, description="Package version")
    description: Union[str, Dict[str, Any]] = Field(
        ..., description="Git URL or mapping with url, ref and resolved-ref"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        # The name becomes a directory name directly under the cache root.
        return check_package_name(v)

    def parsed_description(self, from_lock_file: bool = True) -> Description:
        return parse_description(self.description, from_lock_file=from_lock_file)

    def __str__(self) -> str:
        if self.version:
            return f"{self.name} {self.version}"
        return self.name


class Package(BaseModel):
    """A package installed into the system cache."""

    model_config = ConfigDict(frozen=True)

    name: str
    root: Path
    source: str = GIT_SOURCE_NAME
