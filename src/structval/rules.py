"""Rule engine for structval.

A rule string such as ``min:2,max:10`` is a comma-separated list of checks,
each optionally carrying an argument after the first colon. The argument of
``in`` is itself comma-separated, so an ``in`` check takes the rest of the
rule string as its candidate list.

Text values are checked against every check in order and the first failure
wins. Whole numbers are checked against the first check only; anything after
it is ignored. Lists are checked element by element.

Evaluators raise ``CheckFailedError`` or ``InvalidValidatorSyntaxError`` for
a rejected value and ``UnsupportedValidatorError`` for an unknown check.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .errors import (
    CheckFailedError,
    InvalidValidatorSyntaxError,
    StructValError,
    UnsupportedValidatorError,
)

logger = logging.getLogger(__name__)

_INT_LITERAL = re.compile(r"[+-]?[0-9]+")


class FieldKind(str, Enum):
    """Field shapes the engine can check."""
    STRING = "string"
    INT = "int"
    LIST = "list"


class CheckName(str, Enum):
    """Check names understood by the rule language."""
    LEN = "len"
    MIN = "min"
    MAX = "max"
    IN = "in"


@dataclass(frozen=True)
class RawCheck:
    """A check token as written, before its name is looked up."""
    name: str
    arg: str | None = None

    def __str__(self) -> str:
        return self.name if self.arg is None else f"{self.name}:{self.arg}"

    def resolve(self) -> "Check":
        try:
            name = CheckName(self.name)
        except ValueError:
            raise UnsupportedValidatorError(self.name) from None
        return Check(name, self.arg)


@dataclass(frozen=True)
class Check:
    """A named check with its raw argument."""
    name: CheckName
    arg: str | None = None

    def __str__(self) -> str:
        return self.name.value if self.arg is None else f"{self.name.value}:{self.arg}"

    def int_arg(self) -> int:
        """Argument of ``len``/``min``/``max`` as an integer."""
        return _parse_int(self.arg, str(self))

    def candidates(self) -> list[str]:
        """Candidate strings of an ``in`` check; empty argument means no candidates."""
        if not self.arg:
            return []
        return self.arg.split(",")

    def failure(self, message: str) -> CheckFailedError:
        return CheckFailedError(message, check=str(self))


def tokenize(rule: str) -> list[RawCheck]:
    """Split a rule string into raw check tokens.

    Names are not looked up here, so an unknown name only surfaces when an
    evaluator reaches it.
    """
    tokens = rule.split(",")
    checks: list[RawCheck] = []
    for position, token in enumerate(tokens):
        name, sep, arg = token.partition(":")
        if name == CheckName.IN.value:
            # in consumes the remaining tokens as its candidate list
            rest = tokens[position + 1:]
            checks.append(RawCheck(name, ",".join([arg, *rest]) if sep else None))
            break
        checks.append(RawCheck(name, arg if sep else None))
    return checks


def parse_rule(rule: str) -> list[Check]:
    """Parse a rule string into checks, failing on any unknown check name."""
    return [raw.resolve() for raw in tokenize(rule)]


def validate_string(value: str, rule: str) -> None:
    """Check a text value against every check of ``rule`` in order.

    The first failing check raises. An ``in`` check that matches ends
    evaluation successfully, skipping whatever follows it.
    """
    for raw in tokenize(rule):
        check = raw.resolve()
        if check.name is CheckName.LEN:
            expected = check.int_arg()
            if len(value) != expected:
                raise check.failure(
                    f"expected string of length {expected}, go string of length {len(value)}"
                )
        elif check.name is CheckName.MIN:
            expected = check.int_arg()
            if len(value) < expected:
                raise check.failure(
                    f"string of length {len(value)} less than expected min {expected}"
                )
        elif check.name is CheckName.MAX:
            expected = check.int_arg()
            if len(value) > expected:
                raise check.failure(
                    f"string of length {len(value)} greater than expected max {expected}"
                )
        elif check.name is CheckName.IN:
            candidates = check.candidates()
            if value in candidates:
                return
            raise check.failure(f"value {str.__str__(value)} not found in {format_list(candidates)}")


def validate_int(value: int, rule: str) -> None:
    """Check a whole number against the first check of ``rule``.

    Later checks are ignored: ``min:5,max:1`` accepts 10.
    """
    value = int(value)  # plain int, so enum members render as numbers
    tokens = tokenize(rule)
    check = tokens[0].resolve()
    if len(tokens) > 1:
        logger.debug(f"Ignoring {len(tokens) - 1} trailing check(s) in '{rule}' for number value")

    if check.name is CheckName.MIN:
        expected = check.int_arg()
        if value < expected:
            raise check.failure(f"field value {value} less than expected min {expected}")
    elif check.name is CheckName.MAX:
        expected = check.int_arg()
        if value > expected:
            raise check.failure(f"field value {value} greater than expected max {expected}")
    elif check.name is CheckName.IN:
        candidates = (check.arg or "").split(",")
        for candidate in candidates:
            if _parse_int(candidate, str(check)) == value:
                return
        raise check.failure(f"value {value} not found in {format_list(candidates)}")
    else:
        raise UnsupportedValidatorError(check.name.value)


def validate_list(values: Sequence, rule: str) -> None:
    """Check list elements in order; the first failing element raises.

    Each element is checked by its own type: text or whole number. Elements
    of any other type are passed over.
    """
    for index, element in enumerate(values):
        try:
            if isinstance(element, str):
                validate_string(element, rule)
            elif isinstance(element, int) and not isinstance(element, bool):
                validate_int(element, rule)
            else:
                logger.debug(f"Skipping list element {index} of type {type(element).__name__}")
        except StructValError as e:
            e.index = index
            raise


def format_list(items: Sequence[str]) -> str:
    """Render items space-separated in brackets: ``[a b c]``."""
    return "[" + " ".join(items) + "]"


def _parse_int(text: str | None, check: str) -> int:
    if text is None or not _INT_LITERAL.fullmatch(text):
        raise InvalidValidatorSyntaxError(check=check)
    return int(text)
