import logging
from dataclasses import asdict

import pandas as pd

from .config import NO_CLASSROOM_DATA, NO_COURSE_DATA, NO_TOTAL_DATA, UNKNOWN
from .normalize import classroom_sort_key, normalize_arabic
from .records import MergedRow

logger = logging.getLogger(__name__)

MARK_COLUMNS = ['course', 'name', 'total']
STUDENT_COLUMNS = ['corrected_name', 'classroom']


def _join(marks, students):
    """Left-joins marks to the roster on the normalized name, keeping mark order."""
    # object dtype keeps ints and floats as given instead of upcasting the column
    marks_df = pd.DataFrame([asdict(m) for m in marks], columns=MARK_COLUMNS, dtype=object)
    marks_df.insert(0, 'serial', range(1, len(marks_df) + 1))
    marks_df['key'] = marks_df['name'].map(normalize_arabic)

    roster = pd.DataFrame([asdict(s) for s in students], columns=STUDENT_COLUMNS)
    roster['key'] = roster['corrected_name'].map(normalize_arabic)
    # Several roster rows can share a key; the earliest one wins.
    roster = roster.drop_duplicates(subset='key', keep='first')

    merged = marks_df.merge(roster[['key', 'classroom']], on='key', how='left')
    merged['classroom'] = merged['classroom'].fillna(UNKNOWN)
    return merged


def _to_rows(df):
    return [
        MergedRow(
            serial=int(row.serial),
            course=row.course,
            name=row.name,
            total=row.total,
            classroom=row.classroom,
        )
        for row in df.itertuples(index=False)
    ]


def merge_records(marks, students):
    """
    Joins every mark to its student's classroom and orders the result by
    classroom.

    Serial numbers follow the original mark order and are kept through the
    sort, so they do not read 1..n down the finished report. Marks without a
    roster match land in the "unknown" classroom; roster rows without marks
    are dropped.
    """
    merged = _join(marks, students)
    unmatched = int((merged['classroom'] == UNKNOWN).sum())
    if unmatched:
        logger.info("%d of %d marks have no roster match", unmatched, len(merged))

    merged = merged.sort_values(
        'classroom',
        key=lambda col: col.map(classroom_sort_key),
        kind='stable',
    )
    return _to_rows(merged)


def preview_rows(marks, students, limit=5):
    """First `limit` rows as they would be merged, for the upload preview."""
    if marks and students:
        return _to_rows(_join(marks[:limit], students))
    if marks:
        return [
            MergedRow(serial=i + 1, course=m.course, name=m.name, total=m.total, classroom=NO_CLASSROOM_DATA)
            for i, m in enumerate(marks[:limit])
        ]
    return [
        MergedRow(serial=i + 1, course=NO_COURSE_DATA, name=s.corrected_name, total=NO_TOTAL_DATA, classroom=s.classroom)
        for i, s in enumerate(students[:limit])
    ]
