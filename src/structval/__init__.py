"""structval - tag-driven field validation for Python records.

structval reads per-field rule strings such as ``len:4`` or ``in:1,2,3`` from
dataclass and pydantic model fields, checks text, whole-number and list
values against them, and reports every violation at once.
"""

__version__ = "0.1.0"
__author__ = "structval contributors"
__description__ = "Tag-driven field validation for dataclasses and pydantic models"

from structval.config import ValidatorConfig, load_config
from structval.errors import (
    CheckFailedError,
    ConfigurationDefect,
    InvalidValidatorSyntaxError,
    NotAStructError,
    StructValError,
    UnexportedFieldValidationError,
    UnsupportedFieldTypeError,
    UnsupportedValidatorError,
    ValidationError,
    ValidationErrors,
)
from structval.reflector import rule
from structval.rules import Check, CheckName, FieldKind, parse_rule
from structval.validator import Validator, collect, validate

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "Check",
    "CheckFailedError",
    "CheckName",
    "ConfigurationDefect",
    "FieldKind",
    "InvalidValidatorSyntaxError",
    "NotAStructError",
    "StructValError",
    "UnexportedFieldValidationError",
    "UnsupportedFieldTypeError",
    "UnsupportedValidatorError",
    "ValidationError",
    "ValidationErrors",
    "Validator",
    "ValidatorConfig",
    "collect",
    "load_config",
    "parse_rule",
    "rule",
    "validate",
]
