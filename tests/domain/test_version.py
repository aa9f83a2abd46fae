"""Tests for SchemaVersion."""

import pytest

from vehicle_store.domain.version import SchemaVersion
from vehicle_store.exceptions import InvalidSchemaVersionError


class TestParse:
    """Test SchemaVersion.parse."""

    def test_parse_valid(self) -> None:
        assert SchemaVersion.parse("1.2.3") == SchemaVersion(1, 2, 3)

    def test_parse_strips_whitespace(self) -> None:
        assert SchemaVersion.parse(" 2.0.10\n") == SchemaVersion(2, 0, 10)

    @pytest.mark.parametrize(
        "value",
        ["", "1", "1.0", "1.0.0.0", "v1.0.0", "1.0.0rc1", "1.a.0", "1..0"],
    )
    def test_parse_invalid(self, value: str) -> None:
        with pytest.raises(InvalidSchemaVersionError) as exc_info:
            SchemaVersion.parse(value)
        assert exc_info.value.value == value

    def test_negative_component_rejected(self) -> None:
        with pytest.raises(InvalidSchemaVersionError):
            SchemaVersion(1, -1, 0)


class TestOrderingAndText:
    """Test ordering, equality and serialization."""

    def test_str_round_trip(self) -> None:
        version = SchemaVersion(3, 14, 1)
        assert str(version) == "3.14.1"
        assert SchemaVersion.parse(str(version)) == version

    def test_ordering_is_numeric(self) -> None:
        assert SchemaVersion.parse("1.10.0") > SchemaVersion.parse("1.9.9")
        assert SchemaVersion(1, 0, 0) < SchemaVersion(2, 0, 0)

    def test_equal_versions_hash_equal(self) -> None:
        versions = {SchemaVersion(1, 0, 0), SchemaVersion.parse("1.0.0")}
        assert len(versions) == 1
