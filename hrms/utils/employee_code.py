"""
Employee code formatting and validation.

A code is ``prefix + separator + digits`` where the digits are zero-padded
to the pattern's ``min_digits`` width, e.g. ``ACQ001`` or ``ACQ-042``.
Numbering is per prefix family: only codes that start with the current
``prefix + separator`` take part in picking the next number.
"""
import re
from typing import Iterable, Pattern

from hrms.schemas.hr.employee_code_schema import EmployeeCodePattern


def format_code(number: int, pattern: EmployeeCodePattern) -> str:
    """Format ``number`` as a code; wider numbers are never truncated."""
    padded = str(number).zfill(pattern.min_digits)
    return f"{pattern.prefix}{pattern.separator}{padded}"


def _family_stem(pattern: EmployeeCodePattern) -> str:
    return f"{re.escape(pattern.prefix)}{re.escape(pattern.separator)}"


def build_extraction_regex(pattern: EmployeeCodePattern) -> Pattern:
    return re.compile(rf"{_family_stem(pattern)}([0-9]+)", re.IGNORECASE | re.ASCII)


def build_validation_regex(pattern: EmployeeCodePattern) -> Pattern:
    return re.compile(rf"{_family_stem(pattern)}[0-9]{{{pattern.min_digits},}}", re.IGNORECASE | re.ASCII)


def extract_number(code: str, pattern: EmployeeCodePattern) -> int:
    """Return the numeric suffix of ``code``, or 0 when it is not in the family."""
    match = build_extraction_regex(pattern).fullmatch(code or "")
    return int(match.group(1)) if match else 0


def next_code(existing_codes: Iterable[str], pattern: EmployeeCodePattern) -> str:
    """Return the code after the highest one in the pattern's family."""
    stem = f"{pattern.prefix}{pattern.separator}".upper()
    max_number = 0
    for code in existing_codes:
        if not code or not code.upper().startswith(stem):
            continue
        max_number = max(max_number, extract_number(code, pattern))
    return format_code(max_number + 1, pattern)


def validate_code(code: str, pattern: EmployeeCodePattern) -> bool:
    return bool(build_validation_regex(pattern).fullmatch(code or ""))


def like_prefix(pattern: EmployeeCodePattern, escape: str = "\\") -> str:
    """SQL LIKE pattern matching every code of the family."""
    stem = f"{pattern.prefix}{pattern.separator}"
    for char in (escape, "%", "_"):
        stem = stem.replace(char, escape + char)
    return f"{stem}%"
