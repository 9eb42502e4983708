"""Field discovery for records.

A record is an instance of a dataclass or of a pydantic model. Rules are read
from dataclass field metadata or from a pydantic field's
``json_schema_extra`` under the configured tag name (``validate`` by
default)::

    @dataclass
    class User:
        name: str = rule("min:1,max:32")
        role: str = field(default="user", metadata={"validate": "in:user,admin"})

    class Order(BaseModel):
        code: int = Field(json_schema_extra={"validate": "in:1,2,3"})
"""

import dataclasses
import logging
import typing
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .config import DEFAULT_TAG_NAME
from .errors import NotAStructError, UnexportedFieldValidationError, UnsupportedValidatorError
from .rules import FieldKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSpec:
    """A rule-bearing field of one record."""
    name: str
    kind: FieldKind | None  # None when the declared type is not checkable
    type_name: str
    rule: str
    value: Any

    @property
    def exported(self) -> bool:
        return _is_exported(self.name)


def rule(rule_string: str, *, tag_name: str = DEFAULT_TAG_NAME, **kwargs) -> Any:
    """Dataclass field carrying a validation rule.

    Extra keyword arguments go to ``dataclasses.field``; given ``metadata`` is
    kept alongside the rule.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_name] = rule_string
    return dataclasses.field(metadata=metadata, **kwargs)


def is_record(value: Any) -> bool:
    """True for dataclass and pydantic model instances, not their classes."""
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or isinstance(value, BaseModel)


def iter_fields(record: Any, tag_name: str = DEFAULT_TAG_NAME) -> Iterator[FieldSpec]:
    """Yield rule-bearing fields of ``record`` in declaration order.

    Fields without a rule are skipped. Reaching a rule on an unexported field
    raises ``UnexportedFieldValidationError``; nothing after it is yielded.

    Raises:
        NotAStructError: If ``record`` is not a dataclass or pydantic model instance
    """
    if not is_record(record):
        raise NotAStructError()

    for name, annotation, rule_string in _declared_fields(record, tag_name):
        if not rule_string:
            continue
        if not _is_exported(name):
            logger.debug(f"Rule '{rule_string}' found on unexported field {name}")
            raise UnexportedFieldValidationError(name)

        value = getattr(record, name)
        kind = resolve_kind(annotation, value)
        yield FieldSpec(
            name=name,
            kind=kind,
            type_name=_type_name(annotation, value),
            rule=rule_string,
            value=value,
        )


def resolve_kind(annotation: Any, value: Any) -> FieldKind | None:
    """Map a declared type to a field kind.

    The runtime type of ``value`` stands in when there is no usable
    annotation. Returns None for types the engine cannot check.
    """
    if annotation is None or annotation is Any:
        annotation = type(value)

    origin = typing.get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return None
    if issubclass(origin, bool):
        return None
    if issubclass(origin, str):
        return FieldKind.STRING
    if issubclass(origin, int):
        return FieldKind.INT
    if issubclass(origin, (bytes, bytearray)):
        return None
    if issubclass(origin, Sequence):
        return FieldKind.LIST
    return None


def _declared_fields(record: Any, tag_name: str) -> Iterator[tuple[str, Any, str]]:
    """Yield (name, annotation, rule) for every declared field of ``record``."""
    if isinstance(record, BaseModel):
        for name, info in type(record).model_fields.items():
            extra = info.json_schema_extra
            rule_string = extra.get(tag_name, "") if isinstance(extra, dict) else ""
            yield name, info.annotation, _check_rule_type(name, rule_string)
        return

    hints = _type_hints(type(record))
    for f in dataclasses.fields(record):
        rule_string = f.metadata.get(tag_name, "")
        yield f.name, hints.get(f.name), _check_rule_type(f.name, rule_string)


def _is_exported(name: str) -> bool:
    return not name.startswith("_")


def _check_rule_type(name: str, rule_string: Any) -> str:
    if not isinstance(rule_string, str):
        logger.error(f"Rule on field {name} is {type(rule_string).__name__}, expected str")
        raise UnsupportedValidatorError(repr(rule_string))
    return rule_string


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        # Unresolvable forward references; fall back to runtime value types
        logger.debug(f"Could not resolve type hints of {cls.__name__}: {e}")
        return {}


def _type_name(annotation: Any, value: Any) -> str:
    if annotation is None or annotation is Any:
        return type(value).__name__
    return getattr(annotation, "__name__", None) or repr(annotation)
