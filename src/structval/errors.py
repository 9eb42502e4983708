"""Error model for structval.

Two disjoint hierarchies live here. ``StructValError`` covers ordinary
validation outcomes: bad input, rejected field values and the aggregated
result. ``ConfigurationDefect`` covers programming mistakes in the rules or
record declarations and does not derive from ``StructValError``, so
``except StructValError`` does not catch it.

Classes whose constructor arguments differ from their message define
``__reduce__`` so that copies and pickles are rebuilt from those arguments.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


class StructValError(Exception):
    """Base class for ordinary validation outcomes."""
    check: str | None = None  # raw check token that produced the error
    index: int | None = None  # list element position, set by the list evaluator


class NotAStructError(StructValError):
    """Raised when the value given to ``validate`` is not a record."""

    def __init__(self, message: str = "wrong argument given, should be a struct"):
        super().__init__(message)


class InvalidValidatorSyntaxError(StructValError):
    """A rule argument could not be parsed into what its check expects."""

    def __init__(self, message: str = "invalid validator syntax", check: str | None = None):
        super().__init__(message)
        self.check = check


class UnexportedFieldValidationError(StructValError):
    """A rule was attached to a private (underscore-prefixed) field."""

    def __init__(self, field_name: str | None = None):
        super().__init__("validation for unexported field is not allowed")
        self.field_name = field_name

    def __reduce__(self):
        return (type(self), (self.field_name,), self.__dict__)


class CheckFailedError(StructValError):
    """A single check rejected a field value."""

    def __init__(self, message: str, check: str | None = None):
        super().__init__(message)
        self.check = check


class ConfigurationDefect(Exception):
    """Base class for faults in record declarations or rule strings."""


class UnsupportedFieldTypeError(ConfigurationDefect):
    """A rule was attached to a field of a kind the engine cannot check."""

    def __init__(self, type_name: str):
        super().__init__(f"unsupported field type {type_name}")
        self.type_name = type_name

    def __reduce__(self):
        return (type(self), (self.type_name,), self.__dict__)


class UnsupportedValidatorError(ConfigurationDefect):
    """A rule string named a check the engine does not know."""

    def __init__(self, validator: str):
        super().__init__(f"unsupported validator type {validator}")
        self.validator = validator

    def __reduce__(self):
        return (type(self), (self.validator,), self.__dict__)


@dataclass
class ValidationError:
    """One violation: the failing field and the error that describes it."""
    err: Exception
    field: str | None = None
    check: str | None = None  # raw check token, e.g. "len:4"
    index: int | None = None  # list element position, if any

    @property
    def message(self) -> str:
        return str(self.err)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "field": self.field,
            "check": self.check,
            "index": self.index,
            "kind": type(self.err).__name__,
            "message": self.message,
        }


class ValidationErrors(StructValError):
    """Ordered collection of violations from one validation call.

    Empty means the record is valid, so the collection is falsy when empty.
    ``str()`` joins the individual messages with newlines.
    """

    def __init__(self, errors: list[ValidationError] | None = None):
        self._errors: list[ValidationError] = list(errors or [])
        super().__init__(str(self))

    @property
    def errors(self) -> list[ValidationError]:
        return self._errors

    def append(self, error: ValidationError) -> None:
        self._errors.append(error)
        self.args = (str(self),)

    def __reduce__(self):
        return (type(self), (self._errors,), self.__dict__)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __getitem__(self, index: int) -> ValidationError:
        return self._errors[index]

    def __str__(self) -> str:
        return "\n".join(error.message for error in self._errors)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "valid": not self._errors,
            "count": len(self._errors),
            "errors": [error.to_dict() for error in self._errors],
        }
