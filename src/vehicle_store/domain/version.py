"""Schema version value type.

A schema version is a plain ``major.minor.patch`` release. Parsing goes
through ``packaging.version`` so odd inputs ("1.0", "v1.0.0", "1.0.0rc1")
are rejected consistently instead of being half-understood.
"""

from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

from vehicle_store.exceptions import InvalidSchemaVersionError

_RELEASE_PARTS = 3


@dataclass(frozen=True, order=True)
class SchemaVersion:
    """Structural revision of the persisted data format."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        """Reject negative components."""
        if min(self.major, self.minor, self.patch) < 0:
            raise InvalidSchemaVersionError(
                f"{self.major}.{self.minor}.{self.patch}"
            )

    @classmethod
    def parse(cls, value: str) -> "SchemaVersion":
        """Parse ``"major.minor.patch"``.

        Raises:
            InvalidSchemaVersionError: If value is not exactly three
                dot-separated non-negative integers

        """
        text = value.strip()
        if text.count(".") != _RELEASE_PARTS - 1 or not all(
            part.isdigit() for part in text.split(".")
        ):
            raise InvalidSchemaVersionError(value)

        try:
            parsed = Version(text)
        except InvalidVersion as e:
            raise InvalidSchemaVersionError(value) from e

        if (
            parsed.is_prerelease
            or parsed.is_postrelease
            or parsed.is_devrelease
            or parsed.local is not None
            or len(parsed.release) != _RELEASE_PARTS
        ):
            raise InvalidSchemaVersionError(value)

        major, minor, patch = parsed.release
        return cls(major, minor, patch)

    def __str__(self) -> str:
        """Serialize as ``major.minor.patch``."""
        return f"{self.major}.{self.minor}.{self.patch}"
