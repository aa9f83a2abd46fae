"""JSON Schema validation for export documents.

Export files leave the app and may come back edited by hand, so they are
checked against ``export.schema.json`` before being trusted.
"""

from functools import cache
from pathlib import Path
from typing import Any

import orjson
from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from vehicle_store.logger import get_logger

logger = get_logger(__name__)

SCHEMA_DIR = Path(__file__).parent
EXPORT_SCHEMA_PATH = SCHEMA_DIR / "export.schema.json"


class SchemaValidationError(Exception):
    """Raised when a document does not match its JSON schema."""

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize schema validation error.

        Args:
            message: Error message
            path: JSON path where the error occurred

        """
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with path information."""
        if self.path:
            return f"at '{self.path}': {super().__str__()}"
        return super().__str__()


@cache
def _export_validator() -> Draft7Validator:
    with EXPORT_SCHEMA_PATH.open("rb") as f:
        schema = orjson.loads(f.read())
    return Draft7Validator(schema)


def validate_export_document(document: Any) -> None:  # noqa: ANN401
    """Validate a parsed export document.

    Raises:
        SchemaValidationError: With the most relevant validation error

    """
    error = best_match(_export_validator().iter_errors(document))
    if error is None:
        return

    path = (
        ".".join(str(p) for p in error.absolute_path)
        if error.absolute_path
        else "root"
    )
    logger.debug("Export validation failed at %s: %s", path, error.message)
    raise SchemaValidationError(error.message, path=path)
