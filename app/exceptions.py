"""Catalog exceptions.

Errors raised by the store and the request decoders. Each carries the HTTP
status it maps to so the application boundary can translate it without
inspecting the message.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base class for all catalog errors."""

    status_code = 500
    error_code = "CATALOG_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BadRequestError(CatalogError):
    """Malformed body or non-numeric path identifier."""

    status_code = 400
    error_code = "BAD_REQUEST"


class NotFoundError(CatalogError):
    """The targeted identifier does not exist in its collection."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int) -> None:
        super().__init__(
            f"{entity_type} not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id
