"""Filing error kinds surfaced to upload handlers."""
from __future__ import annotations

from typing import Any, Dict, Optional


class FilingError(Exception):
    code = "FILING_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def as_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(FilingError):
    """A required filing field is missing or blank. Nothing was filed."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"'{field}' is required for this upload location", {"field": field})
        self.field = field


class OverridePathInvalid(FilingError):
    code = "OVERRIDE_PATH_INVALID"

    def __init__(self, path: Optional[str]):
        super().__init__("Override path must be a non-empty folder path", {"path": path})


class SequenceCollisionError(FilingError):
    """Another live document already holds this folder path + display name.

    Callers retry resolution against a fresh document snapshot.
    """

    code = "SEQUENCE_COLLISION"

    def __init__(self, folder_path: str, display_name: str):
        super().__init__(
            f"'{display_name}' already exists in '{folder_path}'",
            {"folder_path": folder_path, "display_name": display_name},
        )
        self.folder_path = folder_path
        self.display_name = display_name
