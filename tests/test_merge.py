"""
Unit Tests for the Merger

Tests for:
- Name matching across spelling variants
- Serial numbering
- Left join semantics
- Classroom ordering and stability
- Upload preview rows
"""

from student_reports.config import NO_CLASSROOM_DATA, NO_COURSE_DATA, NO_TOTAL_DATA, UNKNOWN
from student_reports.merge import merge_records, preview_rows
from student_reports.normalize import classroom_sort_key
from student_reports.records import MarkRecord, MergedRow, StudentRecord


def mark(name, course='رياضيات', total=50):
    return MarkRecord(course=course, name=name, total=total)


def student(name, classroom):
    return StudentRecord(corrected_name=name, classroom=classroom)


class TestMergeRecords:
    """Tests for merge_records"""

    def test_matches_across_spelling_variants(self):
        """Alef and ya variants still find the student's classroom"""
        rows = merge_records([mark('احمد علي')], [student('أحمد على', '3A')])
        assert rows == [MergedRow(serial=1, course='رياضيات', name='احمد علي', total=50, classroom='3A')]

    def test_serials_follow_input_order(self):
        """The first mark keeps serial 1 even when sorted to the end"""
        marks = [mark('زيد'), mark('عمر'), mark('ليلى')]
        students = [student('زيد', 'ج'), student('عمر', 'أ'), student('ليلى', 'ب')]

        rows = merge_records(marks, students)

        assert [r.classroom for r in rows] == ['أ', 'ب', 'ج']
        assert [r.serial for r in rows] == [2, 3, 1]
        assert rows[-1].name == 'زيد'

    def test_unmatched_mark_is_kept(self):
        """Marks without a roster entry get the placeholder classroom"""
        rows = merge_records([mark('زيد'), mark('مجهول')], [student('زيد', '3A')])
        by_name = {r.name: r.classroom for r in rows}
        assert by_name == {'زيد': '3A', 'مجهول': UNKNOWN}

    def test_unmatched_student_is_dropped(self):
        """Roster entries without marks produce no rows"""
        rows = merge_records([mark('زيد')], [student('زيد', '3A'), student('عمر', '3B')])
        assert len(rows) == 1
        assert rows[0].name == 'زيد'

    def test_one_row_per_mark(self):
        """A student with several subjects appears once per subject"""
        marks = [mark('زيد', 'رياضيات'), mark('زيد', 'علوم'), mark('زيد', 'لغة عربية')]
        rows = merge_records(marks, [student('زيد', '3A')])
        assert [r.course for r in rows] == ['رياضيات', 'علوم', 'لغة عربية']
        assert all(r.classroom == '3A' for r in rows)

    def test_first_roster_match_wins(self):
        """Duplicate normalized names resolve to the earliest roster row"""
        students = [student('أحمد', '3B'), student('احمد', '3A')]
        rows = merge_records([mark('احمد')], students)
        assert rows[0].classroom == '3B'

    def test_sorted_by_classroom(self):
        """Rows are non-decreasing under Arabic collation"""
        marks = [mark(f'طالب {i}') for i in range(6)]
        classrooms = ['ي', '3B', 'أ', 'B', '3A', 'ت']
        students = [student(f'طالب {i}', c) for i, c in enumerate(classrooms)]

        keys = [classroom_sort_key(r.classroom) for r in merge_records(marks, students)]

        assert keys == sorted(keys)

    def test_sort_is_stable(self):
        """Rows sharing a classroom keep their input order"""
        marks = [mark('زيد'), mark('عمر'), mark('سعد'), mark('هند')]
        students = [student('زيد', 'ب'), student('عمر', 'أ'), student('سعد', 'ب'), student('هند', 'أ')]

        rows = merge_records(marks, students)

        assert [(r.classroom, r.serial) for r in rows] == [('أ', 2), ('أ', 4), ('ب', 1), ('ب', 3)]

    def test_totals_survive_the_join(self):
        """Marks keep their totals through merge and sort"""
        rows = merge_records([mark('زيد', total=85), mark('عمر', total=72.5)], [student('عمر', 'أ')])
        assert {r.name: r.total for r in rows} == {'زيد': 85, 'عمر': 72.5}

    def test_integer_totals_stay_integers(self):
        """A mix of whole and fractional totals does not turn 92 into 92.0"""
        rows = merge_records([mark('زيد', total=92), mark('عمر', total=72.5)], [student('عمر', 'أ')])
        totals = {r.name: r.total for r in rows}
        assert type(totals['زيد']) is int
        assert totals['عمر'] == 72.5


class TestPreviewRows:
    """Tests for preview_rows"""

    def test_both_uploads(self):
        """Preview rows are merged but keep upload order"""
        marks = [mark('زيد'), mark('عمر')]
        students = [student('عمر', 'أ'), student('زيد', 'ب')]
        rows = preview_rows(marks, students)
        assert [(r.name, r.classroom) for r in rows] == [('زيد', 'ب'), ('عمر', 'أ')]

    def test_limit(self):
        """Only the first rows are previewed"""
        marks = [mark(f'طالب {i}') for i in range(10)]
        assert len(preview_rows(marks, [student('طالب 0', 'أ')], limit=5)) == 5

    def test_marks_only(self):
        """Without a roster the classroom column carries a notice"""
        rows = preview_rows([mark('زيد')], [])
        assert rows[0].classroom == NO_CLASSROOM_DATA
        assert rows[0].name == 'زيد'

    def test_roster_only(self):
        """Without marks the course and total columns carry notices"""
        rows = preview_rows([], [student('زيد', 'ب')])
        assert rows[0].course == NO_COURSE_DATA
        assert rows[0].total == NO_TOTAL_DATA
        assert rows[0].classroom == 'ب'

    def test_raw_totals_are_shown_as_uploaded(self):
        """Totals that were not parsed pass through untouched"""
        marks = [MarkRecord(course='رياضيات', name='زيد', total='85-A')]
        rows = preview_rows(marks, [student('زيد', 'ب')])
        assert rows[0].total == '85-A'
