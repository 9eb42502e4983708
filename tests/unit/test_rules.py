"""Unit tests for rule parsing and the text/number/list evaluators."""

from enum import Enum, IntEnum

import pytest

from structval.errors import (
    CheckFailedError,
    InvalidValidatorSyntaxError,
    UnsupportedValidatorError,
)
from structval.rules import (
    Check,
    CheckName,
    RawCheck,
    format_list,
    parse_rule,
    tokenize,
    validate_int,
    validate_list,
    validate_string,
)


class Color(str, Enum):
    RED = "red"
    BLUE = "blue"


class Level(int, Enum):
    LOW = 1
    HIGH = 9


class Priority(IntEnum):
    URGENT = 0


class TestTokenize:
    """Test rule string tokenization."""

    def test_single_check(self):
        """Test a single name:arg token."""
        assert tokenize("len:4") == [RawCheck("len", "4")]

    def test_multiple_checks_keep_order(self):
        """Test checks come back in rule order."""
        assert tokenize("min:1,max:10") == [RawCheck("min", "1"), RawCheck("max", "10")]

    def test_in_consumes_remaining_tokens(self):
        """Test in takes the rest of the rule as its candidate list."""
        assert tokenize("min:1,in:a,b,c") == [RawCheck("min", "1"), RawCheck("in", "a,b,c")]

    def test_in_with_empty_argument(self):
        """Test in: keeps an empty argument."""
        assert tokenize("in:") == [RawCheck("in", "")]

    def test_token_without_colon_has_no_argument(self):
        """Test a bare name has no argument."""
        assert tokenize("len") == [RawCheck("len", None)]

    def test_splits_on_first_colon_only(self):
        """Test later colons stay in the argument."""
        assert tokenize("max:1:2") == [RawCheck("max", "1:2")]

    def test_unknown_names_are_not_rejected(self):
        """Names are only looked up during evaluation."""
        assert tokenize("bogus:1") == [RawCheck("bogus", "1")]

    def test_raw_check_string_form(self):
        """Test raw checks render back to rule text."""
        assert str(RawCheck("in", "a,b")) == "in:a,b"
        assert str(RawCheck("len")) == "len"


class TestParseRule:
    """Test eager rule parsing."""

    def test_parse_known_checks(self):
        """Test known names resolve to CheckName members."""
        checks = parse_rule("len:3,min:1,max:5")
        assert [c.name for c in checks] == [CheckName.LEN, CheckName.MIN, CheckName.MAX]
        assert [c.arg for c in checks] == ["3", "1", "5"]

    def test_parse_unknown_check_raises(self):
        """Test an unknown name anywhere in the rule is a defect."""
        with pytest.raises(UnsupportedValidatorError, match="unsupported validator type regex"):
            parse_rule("min:1,regex:abc")

    def test_candidates(self):
        """Test candidate lists, including empty and missing arguments."""
        assert Check(CheckName.IN, "a,b").candidates() == ["a", "b"]
        assert Check(CheckName.IN, "").candidates() == []
        assert Check(CheckName.IN, None).candidates() == []

    def test_int_arg_rejects_non_integer(self):
        """Test a non-numeric argument names the offending check."""
        with pytest.raises(InvalidValidatorSyntaxError) as exc_info:
            Check(CheckName.MIN, "abc").int_arg()
        assert exc_info.value.check == "min:abc"

    @pytest.mark.parametrize("arg", ["", " 5", "1.5", "1_000", None])
    def test_int_arg_strict_literals(self, arg):
        """Test only plain signed digit strings are integers."""
        with pytest.raises(InvalidValidatorSyntaxError):
            Check(CheckName.LEN, arg).int_arg()

    @pytest.mark.parametrize("arg,expected", [("5", 5), ("+5", 5), ("-3", -3), ("007", 7)])
    def test_int_arg_accepts_signed_literals(self, arg, expected):
        """Test signs and leading zeros are accepted."""
        assert Check(CheckName.MAX, arg).int_arg() == expected


class TestValidateString:
    """Test the text evaluator."""

    def test_len_matches(self):
        """Test exact length passes."""
        validate_string("Anna", "len:4")

    def test_len_mismatch_message(self):
        """Test length mismatch message and failing check."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_string("Bob", "len:4")
        assert str(exc_info.value) == "expected string of length 4, go string of length 3"
        assert exc_info.value.check == "len:4"

    @pytest.mark.parametrize("value", ["", "abc", "abcd", "abcde"])
    def test_len_violation_iff_length_differs(self, value):
        """Test len fails exactly when the length differs."""
        if len(value) == 4:
            validate_string(value, "len:4")
        else:
            with pytest.raises(CheckFailedError):
                validate_string(value, "len:4")

    def test_min_and_max_in_range(self):
        """Test lengths on and between the bounds pass."""
        for value in ["ab", "abc", "abcd"]:
            validate_string(value, "min:2,max:4")

    def test_min_failure_message(self):
        """Test min failure message."""
        with pytest.raises(CheckFailedError, match="^string of length 1 less than expected min 2$"):
            validate_string("a", "min:2,max:4")

    def test_max_failure_message(self):
        """Test max failure message."""
        with pytest.raises(CheckFailedError, match="^string of length 5 greater than expected max 4$"):
            validate_string("abcde", "min:2,max:4")

    def test_first_failure_stops_evaluation(self):
        """len fails first, so the unknown check after it is never looked up."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_string("abc", "len:4,bogus:1")
        assert exc_info.value.check == "len:4"

    def test_unknown_check_raises_when_reached(self):
        """Test an unknown name is a defect once evaluation reaches it."""
        with pytest.raises(UnsupportedValidatorError):
            validate_string("abcd", "len:4,bogus:1")

    def test_in_match(self):
        """Test a listed value passes."""
        validate_string("admin", "in:user,admin")

    def test_in_not_found_message(self):
        """Test not-found message renders candidates space-separated."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_string("guest", "in:user,admin")
        assert str(exc_info.value) == "value guest not found in [user admin]"

    def test_in_empty_argument_always_fails(self):
        """Test in: has no candidates."""
        with pytest.raises(CheckFailedError, match=r"^value x not found in \[\]$"):
            validate_string("x", "in:")

    def test_in_empty_argument_fails_for_empty_value(self):
        """Test in: rejects the empty string as well."""
        with pytest.raises(CheckFailedError):
            validate_string("", "in:")

    def test_in_match_after_passing_checks(self):
        """Test in is reached once earlier checks pass."""
        validate_string("abc", "min:1,in:abc,def")

    def test_in_after_failing_check_is_not_reached(self):
        """Test an earlier failure wins over in."""
        with pytest.raises(CheckFailedError, match="less than expected min"):
            validate_string("abc", "min:5,in:abc")

    def test_malformed_argument(self):
        """Test non-numeric bound is a syntax error."""
        with pytest.raises(InvalidValidatorSyntaxError, match="invalid validator syntax"):
            validate_string("abc", "max:ten")

    def test_missing_argument(self):
        """Test len without an argument is a syntax error."""
        with pytest.raises(InvalidValidatorSyntaxError):
            validate_string("abc", "len")

    def test_length_counts_characters(self):
        """Test length is counted in characters, not bytes."""
        validate_string("héllo", "len:5")

    def test_str_enum_member_matches_by_value(self):
        """Test str-based enum members are compared by their value."""
        validate_string(Color.RED, "in:red,blue")

    def test_str_enum_member_not_found_message(self):
        """Test str-based enum members render as their value."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_string(Color.RED, "in:blue")
        assert str(exc_info.value) == "value red not found in [blue]"


class TestValidateInt:
    """Test the number evaluator."""

    def test_min(self):
        """Test min bound is inclusive and its failure message."""
        validate_int(5, "min:5")
        with pytest.raises(CheckFailedError, match="^field value 4 less than expected min 5$"):
            validate_int(4, "min:5")

    def test_max(self):
        """Test max bound is inclusive and its failure message."""
        validate_int(5, "max:5")
        with pytest.raises(CheckFailedError, match="^field value 6 greater than expected max 5$"):
            validate_int(6, "max:5")

    def test_negative_bounds(self):
        """Test negative bounds parse and compare."""
        validate_int(-3, "min:-5")
        with pytest.raises(CheckFailedError):
            validate_int(-6, "min:-5")

    def test_only_first_check_applies(self):
        """Test later checks are ignored for numbers."""
        validate_int(10, "min:5,max:1")

    def test_only_first_check_applies_even_if_later_is_unknown(self):
        """Test unknown names after the first check are never looked up."""
        validate_int(10, "min:5,bogus:1")

    def test_in_match(self):
        """Test a listed number passes."""
        validate_int(2, "in:1,2,3")

    def test_in_not_found_message(self):
        """Test not-found message for numbers."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_int(9, "in:1,2,3")
        assert str(exc_info.value) == "value 9 not found in [1 2 3]"

    def test_in_malformed_candidate(self):
        """Test a malformed candidate reached while scanning is a syntax error."""
        with pytest.raises(InvalidValidatorSyntaxError):
            validate_int(3, "in:1,x,3")

    def test_in_match_before_malformed_candidate(self):
        """Test scanning stops at the first match."""
        validate_int(1, "in:1,x")

    def test_in_empty_argument_is_malformed(self):
        """Test in: is a syntax error for numbers."""
        with pytest.raises(InvalidValidatorSyntaxError):
            validate_int(1, "in:")

    def test_malformed_argument(self):
        """Test non-numeric bound is a syntax error."""
        with pytest.raises(InvalidValidatorSyntaxError):
            validate_int(1, "min:abc")

    def test_len_is_unsupported_for_numbers(self):
        """Test len on a number is a defect."""
        with pytest.raises(UnsupportedValidatorError, match="unsupported validator type len"):
            validate_int(1, "len:1")

    def test_unknown_check(self):
        """Test an unknown first check is a defect."""
        with pytest.raises(UnsupportedValidatorError):
            validate_int(1, "between:1")

    def test_int_enum_members_render_as_numbers(self):
        """Test int-based enum members render as their value."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_int(Level.HIGH, "in:1,2,3")
        assert str(exc_info.value) == "value 9 not found in [1 2 3]"

        with pytest.raises(CheckFailedError, match="^field value 0 less than expected min 1$"):
            validate_int(Priority.URGENT, "min:1")


class TestValidateList:
    """Test the list evaluator."""

    def test_all_elements_pass(self):
        """Test text and number lists that satisfy the rule."""
        validate_list(["ab", "cd"], "len:2")
        validate_list([1, 2, 3], "max:3")

    def test_empty_list_passes(self):
        """Test an empty list has nothing to reject."""
        validate_list([], "len:2")

    def test_first_failure_is_reported_with_index(self):
        """Test the failing element's index is attached."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_list(["ab", "abc", "abcd"], "len:2")
        assert exc_info.value.index == 1
        assert str(exc_info.value) == "expected string of length 2, go string of length 3"

    def test_elements_after_failure_are_not_inspected(self):
        """The third element would fail max, but only the second is reported."""
        with pytest.raises(CheckFailedError, match="less than expected min 1") as exc_info:
            validate_list(["ab", "", "abcdef"], "min:1,max:2")
        assert exc_info.value.index == 1

    def test_numbers_use_first_check_only(self):
        """Test number elements follow the first-check rule."""
        validate_list([10, 20], "min:5,max:1")

    def test_unsupported_elements_are_skipped(self):
        """Test floats, None and bools are passed over."""
        validate_list([1.5, None, True], "min:100")

    def test_tuple_of_strings(self):
        """Test tuples are evaluated like lists."""
        with pytest.raises(CheckFailedError, match="value c not found in"):
            validate_list(("a", "c"), "in:a,b")

    def test_enum_elements(self):
        """Test enum elements are reported by value."""
        with pytest.raises(CheckFailedError) as exc_info:
            validate_list([Color.BLUE, Color.RED], "in:blue")
        assert str(exc_info.value) == "value red not found in [blue]"
        assert exc_info.value.index == 1


class TestFormatList:
    """Test list rendering used in messages."""

    def test_format(self):
        """Test bracketed space-separated rendering."""
        assert format_list(["1", "2", "3"]) == "[1 2 3]"
        assert format_list([]) == "[]"
