"""Validation entry points.

``validate`` raises the aggregated ``ValidationErrors`` when a record has
violations; ``collect`` returns it instead, empty when the record is valid.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from .config import ValidatorConfig, create_default_config
from .errors import (
    StructValError,
    UnsupportedFieldTypeError,
    ValidationError,
    ValidationErrors,
)
from .reflector import FieldSpec, iter_fields
from .rules import FieldKind, validate_int, validate_list, validate_string

logger = logging.getLogger(__name__)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


_EVALUATORS: dict[FieldKind, tuple[Callable[[Any], bool], Callable[[Any, str], None]]] = {
    FieldKind.STRING: (_is_string, validate_string),
    FieldKind.INT: (_is_int, validate_int),
    FieldKind.LIST: (_is_list, validate_list),
}


class Validator:
    """Validates records against the rules attached to their fields.

    Holds only configuration, so one instance can be shared freely.
    """

    def __init__(self, config: ValidatorConfig | None = None):
        self.config = config or create_default_config()

    def validate(self, record: Any) -> None:
        """Validate ``record``, raising on any violation.

        Raises:
            ValidationErrors: All field violations, in field order
            NotAStructError: If ``record`` is not a record
            UnexportedFieldValidationError: If a private field carries a rule
            ConfigurationDefect: On an unsupported field type or check name
        """
        errors = self.collect(record)
        if errors:
            raise errors

    def collect(self, record: Any) -> ValidationErrors:
        """Validate ``record`` and return its violations (empty if valid)."""
        # every field is read before any is checked, so a rule on a private
        # field is reported ahead of defects on the fields declared before it
        specs = list(iter_fields(record, self.config.tag_name))
        errors = ValidationErrors()

        for spec in specs:
            try:
                self._check_field(spec)
            except StructValError as e:
                logger.debug(f"Field {spec.name} failed '{spec.rule}': {e}")
                errors.append(ValidationError(err=e, field=spec.name, check=e.check, index=e.index))

        logger.debug(
            f"Validated {type(record).__name__}: {len(specs)} field(s) checked, "
            f"{len(errors)} violation(s)"
        )
        return errors

    def _check_field(self, spec: FieldSpec) -> None:
        if spec.kind is None:
            raise UnsupportedFieldTypeError(spec.type_name)

        accepts, evaluate = _EVALUATORS[spec.kind]
        if not accepts(spec.value):
            # declared type and runtime value disagree
            raise UnsupportedFieldTypeError(type(spec.value).__name__)

        evaluate(spec.value, spec.rule)


def validate(record: Any) -> None:
    """Validate ``record`` with default settings; see ``Validator.validate``."""
    Validator().validate(record)


def collect(record: Any) -> ValidationErrors:
    """Collect violations of ``record`` with default settings."""
    return Validator().collect(record)
