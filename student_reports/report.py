"""
Report assembly: validates the two uploads, cleans and merges them, lays the
table out and returns the finished PDF.
"""
import logging

from .config import EMPTY_DATA_MESSAGE, FONT_NAME, MISSING_INPUT_MESSAGE, RENDER_FAILED_MESSAGE
from .layout import GROUP, ROW, layout_report
from .merge import merge_records
from .records import clean_marks, clean_students
from .render import draw_report, load_font

logger = logging.getLogger(__name__)


# --- Errors ---
class ReportError(Exception):
    """Base class for failures reported back to the uploader."""
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        body = {'error': self.message}
        if self.details is not None:
            body['details'] = self.details
        return body


class MissingInputError(ReportError):
    status_code = 400

    def __init__(self):
        super().__init__(MISSING_INPUT_MESSAGE)


class EmptyDataError(ReportError):
    status_code = 400

    def __init__(self):
        super().__init__(EMPTY_DATA_MESSAGE)


class RenderError(ReportError):
    status_code = 500

    def __init__(self, details):
        super().__init__(RENDER_FAILED_MESSAGE, details=details)


def load_report_font(path, name=FONT_NAME):
    try:
        return load_font(path, name)
    except Exception as e:
        raise RenderError(f"Could not load font {path}: {e}") from e


def require_rows(value):
    """Uploads must arrive as a list of rows."""
    if value is None or not isinstance(value, list):
        raise MissingInputError()
    return value


def prepare_rows(marks_data, student_data):
    """Cleans and merges both uploads, rejecting input that leaves nothing to report."""
    marks = clean_marks(require_rows(marks_data))
    students = clean_students(require_rows(student_data))
    if not marks or not students:
        raise EmptyDataError()
    return merge_records(marks, students)


def render_rows(rows, font, today=None):
    """
    Lays out and draws merged rows.

    Returns (pdf_bytes, summary) where summary counts the rendered pages,
    data rows and classroom groups.
    """
    summary = {'rows': 0, 'groups': 0}

    def counted(bands):
        for band in bands:
            if band.kind == ROW:
                summary['rows'] += 1
            elif band.kind == GROUP:
                summary['groups'] += 1
            yield band

    pdf_bytes, pages = draw_report(counted(layout_report(rows, font, today=today)), font)
    summary['pages'] = pages
    logger.info("Rendered %d rows in %d classroom groups across %d pages",
                summary['rows'], summary['groups'], pages)
    return pdf_bytes, summary


def build_report(marks_data, student_data, font, today=None):
    """Generates the classroom report PDF from the two raw uploads."""
    return render_rows(prepare_rows(marks_data, student_data), font, today=today)
