from .description import (
    BareDescription,
    Description,
    GitDescription,
    descriptions_equal,
    parse_description,
    pin,
    validate_description,
)
from .package import Package, PackageId

__all__ = [
    "BareDescription",
    "Description",
    "GitDescription",
    "Package",
    "PackageId",
    "descriptions_equal",
    "parse_description",
    "pin",
    "validate_description",
]
