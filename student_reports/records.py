"""
Typed records extracted from uploaded spreadsheet rows.

Uploaded rows are plain mappings keyed by whatever header the user's sheet
carried. Every logical field has a closed, priority-ordered set of accepted
headers (Arabic first, then English spellings); `resolve` is the only place
those headers are consulted.
"""
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass

from .config import UNKNOWN

logger = logging.getLogger(__name__)

# --- Field aliases ---
FULL_NAME = 'full_name'
COURSE = 'course'
TOTAL = 'total'
CORRECTED_NAME = 'corrected_name'
CLASSROOM = 'classroom'

FIELD_ALIASES = {
    FULL_NAME: ('الاسم الكامل', 'Full Name', 'full name', 'full_name'),
    COURSE: ('المادة', 'Course', 'course'),
    TOTAL: ('المجموع', 'Total', 'total'),
    CORRECTED_NAME: ('الاسم المصحح', 'Corrected Name', 'corrected name', 'corrected_name'),
    CLASSROOM: ('الصف', 'Classroom', 'classroom'),
}

LEADING_NUMBER = re.compile(r'^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


@dataclass(frozen=True)
class MarkRecord:
    course: str
    name: str
    total: float


@dataclass(frozen=True)
class StudentRecord:
    corrected_name: str
    classroom: str


@dataclass(frozen=True)
class MergedRow:
    serial: int
    course: str
    name: str
    total: float
    classroom: str


def is_present(value):
    """Uploaded values count as missing when None, NaN, empty, zero or False."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value != ''
    return True


def resolve(row, field):
    """Returns the value under the first alias of `field` that holds a present value."""
    for alias in FIELD_ALIASES[field]:
        value = row.get(alias)
        if is_present(value):
            return value
    return None


def format_value(value):
    """Display text for a cell value; integral numbers lose their trailing .0."""
    if isinstance(value, float) and not isinstance(value, bool):
        return str(int(value) if value.is_integer() else round(value, 2))
    return str(value)


def parse_total(value):
    """
    Coerces a mark into a number.

    Numbers pass through. Strings lose their thousands separators and anything
    after the first '-' (so "85-A" reads as 85), then the leading number is
    parsed. Anything unreadable is 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return 0
        return value
    if isinstance(value, str):
        head = value.replace(',', '').split('-')[0]
        match = LEADING_NUMBER.match(head)
        if not match:
            return 0
        return float(match.group(0))
    return 0


def _text(row, field):
    value = resolve(row, field)
    return UNKNOWN if value is None else format_value(value)


def clean_marks(rows, parse_totals=True):
    """
    Keeps the rows that name a student. With `parse_totals` off the total is
    kept exactly as uploaded, for display in the preview.
    """
    marks = []
    for row in rows:
        if not isinstance(row, Mapping) or resolve(row, FULL_NAME) is None:
            continue
        total = resolve(row, TOTAL)
        marks.append(MarkRecord(
            course=_text(row, COURSE),
            name=_text(row, FULL_NAME),
            total=parse_total(total) if parse_totals else total,
        ))
    if len(marks) < len(rows):
        logger.warning("Dropped %d mark rows without a full name", len(rows) - len(marks))
    return marks


def clean_students(rows):
    students = []
    for row in rows:
        if not isinstance(row, Mapping) or resolve(row, CORRECTED_NAME) is None:
            continue
        students.append(StudentRecord(
            corrected_name=_text(row, CORRECTED_NAME),
            classroom=_text(row, CLASSROOM),
        ))
    if len(students) < len(rows):
        logger.warning("Dropped %d roster rows without a corrected name", len(rows) - len(students))
    return students
