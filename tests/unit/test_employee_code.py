import pytest
from hrms.schemas.hr.employee_code_schema import DEFAULT_EMPLOYEE_CODE_PATTERN, EmployeeCodePattern
from hrms.utils.employee_code import (
    extract_number,
    format_code,
    like_prefix,
    next_code,
    validate_code,
)

DASHED = EmployeeCodePattern(prefix="ACQ", separator="-", min_digits=3)
PLAIN = EmployeeCodePattern(prefix="ACQ", separator="", min_digits=3)


class TestFormatCode:
    def test_pads_to_min_digits(self):
        assert format_code(42, DASHED) == "ACQ-042"

    def test_never_truncates_wide_numbers(self):
        assert format_code(1000, PLAIN) == "ACQ1000"

    def test_zero(self):
        assert format_code(0, PLAIN) == "ACQ000"


class TestExtractNumber:
    def test_own_family(self):
        assert extract_number("ACQ-042", DASHED) == 42

    def test_other_prefix_is_zero(self):
        assert extract_number("XYZ-042", DASHED) == 0

    def test_case_insensitive(self):
        assert extract_number("acq-007", DASHED) == 7

    def test_trailing_garbage_is_zero(self):
        assert extract_number("ACQ-042b", DASHED) == 0

    @pytest.mark.parametrize("n", [0, 1, 9, 42, 999, 1000, 123456])
    def test_recovers_formatted_number(self, n):
        assert extract_number(format_code(n, DASHED), DASHED) == n
        assert extract_number(format_code(n, PLAIN), PLAIN) == n

    def test_regex_metacharacters_in_prefix(self):
        pattern = EmployeeCodePattern(prefix="A.B", separator="+", min_digits=2)
        assert extract_number("A.B+15", pattern) == 15
        assert extract_number("AXB+15", pattern) == 0


class TestNextCode:
    def test_after_highest(self):
        assert next_code(["ACQ-001", "ACQ-005", "ACQ-003"], DASHED) == "ACQ-006"

    def test_empty_starts_at_one(self):
        assert next_code([], DASHED) == format_code(1, DASHED)

    def test_ignores_other_families(self):
        codes = ["ACQ-002", "XYZ-900", "ACQ900", "EMP-050"]
        assert next_code(codes, DASHED) == "ACQ-003"

    def test_grows_past_min_digits(self):
        assert next_code(["ACQ999"], PLAIN) == "ACQ1000"

    def test_default_pattern(self):
        assert next_code([], DEFAULT_EMPLOYEE_CODE_PATTERN) == "ACQ001"


class TestValidateCode:
    @pytest.mark.parametrize("n", [0, 7, 123, 99999])
    def test_formatted_codes_are_valid(self, n):
        assert validate_code(format_code(n, DASHED), DASHED)

    def test_too_few_digits(self):
        assert not validate_code("ACQ-42", DASHED)

    def test_missing_separator(self):
        assert not validate_code("ACQ042", DASHED)

    def test_lowercase_accepted(self):
        assert validate_code("acq-042", DASHED)

    def test_empty(self):
        assert not validate_code("", DASHED)


class TestPattern:
    def test_prefix_upper_cased(self):
        assert EmployeeCodePattern(prefix=" emp ").prefix == "EMP"

    def test_min_digits_bounds(self):
        with pytest.raises(ValueError):
            EmployeeCodePattern(min_digits=0)
        with pytest.raises(ValueError):
            EmployeeCodePattern(min_digits=11)

    def test_like_prefix_escapes_wildcards(self):
        pattern = EmployeeCodePattern(prefix="A_B", separator="%", min_digits=3)
        assert like_prefix(pattern) == "A\\_B\\%%"


class TestStrictMatching:
    def test_trailing_newline_rejected(self):
        assert not validate_code("ACQ001\n", PLAIN)
        assert extract_number("ACQ042\n", PLAIN) == 0

    def test_non_ascii_digits_rejected(self):
        assert not validate_code("ACQ١٢٣", PLAIN)
        assert extract_number("ACQ٩٩٩", PLAIN) == 0

    def test_non_ascii_digits_do_not_advance_numbering(self):
        assert next_code(["ACQ٩٩٩", "ACQ004"], PLAIN) == "ACQ005"
