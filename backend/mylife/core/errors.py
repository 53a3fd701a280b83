"""Error taxonomy for the records service.

Every business-rule or lookup failure raised by the services is a
``MyLifeError``. Each one knows the HTTP status it maps to, the list of
messages to report, and the ``data`` to echo back to the client (the
submitted payload for rejections, the requested id for lookups).
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mylife.core.schemas.validation import FieldError


class MyLifeError(Exception):
    """Base exception for all records service errors."""

    status_code: int = 500
    kind: str = "internal"

    def __init__(self, messages: Sequence[str | FieldError], data: Any = None) -> None:
        self.messages = list(messages)
        self.data = data
        super().__init__(self._summary())

    def _summary(self) -> str:
        first = self.messages[0] if self.messages else ""
        return first if isinstance(first, str) else first.msg


class ShapeError(MyLifeError):
    """Malformed, missing or out-of-range input fields."""

    status_code = 422
    kind = "validation"

    def __init__(self, errors: Sequence[FieldError], data: Any = None) -> None:
        super().__init__(errors, data)
        self.errors = list(errors)


class DuplicateError(MyLifeError):
    """A sibling record with the same identifying key already exists."""

    status_code = 422
    kind = "duplicate"

    def __init__(self, message: str, data: Any = None, existing_id: str | None = None) -> None:
        super().__init__([message], data)
        self.existing_id = existing_id


class InvalidReferenceError(MyLifeError):
    """One or more referenced tags or people do not exist or have the wrong role."""

    status_code = 422
    kind = "invalid-reference"

    def __init__(self, messages: str | Sequence[str], data: Any = None) -> None:
        if isinstance(messages, str):
            messages = [messages]
        super().__init__(messages, data)


class ReferenceNotFoundError(InvalidReferenceError):
    def __init__(self, identifier: Any, label: str) -> None:
        super().__init__(f"Invalid {label}: '{identifier}'.")
        self.identifier = identifier


class RoleMismatchError(InvalidReferenceError):
    def __init__(self, identifier: Any, label: str) -> None:
        super().__init__(f"Invalid {label}: '{identifier}'.")
        self.identifier = identifier


class ReferentialIntegrityError(MyLifeError):
    """An update or delete would orphan references held by other collections."""

    status_code = 422
    kind = "referential-integrity"

    def __init__(self, message: str, data: Any = None, references: Sequence[Any] = ()) -> None:
        super().__init__([message], data)
        self.references = list(references)


class UnknownNoteTypeError(MyLifeError):
    status_code = 422
    kind = "unknown-type"

    def __init__(self, type_name: Any, data: Any = None) -> None:
        shown = "" if type_name is None else type_name
        super().__init__([f"Invalid note type '{shown}'."], data)
        self.type_name = type_name


class NotFoundError(MyLifeError):
    status_code = 404
    kind = "not-found"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__([f"Could not find a {entity} with ID '{entity_id}'."], entity_id)
        self.entity = entity
        self.entity_id = entity_id


class InternalError(MyLifeError):
    status_code = 500
    kind = "internal"

    def __init__(self, message: str, data: Any = None) -> None:
        super().__init__([message], data)


class StoreError(Exception):
    """Raised by document store implementations when an operation fails."""


class StoreConflictError(StoreError):
    """Raised when the store itself rejects a write as violating a unique key."""
