"""Bundled JSON schemas and their validator."""

from vehicle_store.schemas.validator import (
    SchemaValidationError,
    validate_export_document,
)

__all__ = ["SchemaValidationError", "validate_export_document"]
