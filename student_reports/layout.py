"""
Page layout for the classroom report.

`layout_report` walks the merged rows once and yields `Band`s: the boxes and
text runs of one horizontal strip of the table, already placed on a page.
It never touches a canvas. The only thing it needs from the font is
`width(text, size)`, so the page-break and group-header rules can be checked
against any object that measures text.

Coordinates follow PDF conventions: origin at the bottom-left corner, y
growing upwards.
"""
from dataclasses import dataclass, replace
from datetime import date

from .config import (
    CELL_SIZE, CLASSROOM_LABEL, COLUMNS, DATE_LABEL, DATE_SIZE, GROUP_SIZE,
    HEADER_HEIGHT, HEADER_SIZE, MARGIN, MIN_NAME_WIDTH, PAGE_HEIGHT,
    PAGE_WIDTH, REPORT_TITLE, ROW_HEIGHT, SAFE_MARGIN, TITLE_SIZE,
)
from .records import format_value

TITLE = 'title'
HEADER = 'header'
GROUP = 'group'
ROW = 'row'

TITLE_GAP = 40
BASELINE_OFFSET = 20
ARABIC_DIGITS = str.maketrans('0123456789', '٠١٢٣٤٥٦٧٨٩')


@dataclass(frozen=True)
class Column:
    title: str
    key: str
    width: float


@dataclass(frozen=True)
class Table:
    columns: tuple
    start_x: float
    width: float


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float
    shaded: bool = False


@dataclass(frozen=True)
class TextRun:
    text: str
    x: float
    y: float
    size: int


@dataclass(frozen=True)
class Band:
    kind: str
    page: int
    boxes: tuple
    texts: tuple


@dataclass(frozen=True)
class Cursor:
    page: int
    y: float
    classroom: str = None

    def down(self, amount):
        return replace(self, y=self.y - amount)

    def next_page(self):
        return replace(self, page=self.page + 1, y=PAGE_HEIGHT - MARGIN)


def table_geometry(columns=None):
    """
    Places the table against the right margin.

    If the table would run past the right safety margin, the name column gives
    up exactly the overflow, but never shrinks below MIN_NAME_WIDTH.
    """
    if columns is None:
        columns = [Column(*entry) for entry in COLUMNS]
    columns = list(columns)
    table_width = sum(col.width for col in columns)
    start_x = max(PAGE_WIDTH - MARGIN - table_width, SAFE_MARGIN)

    overflow = start_x + table_width - (PAGE_WIDTH - SAFE_MARGIN)
    if overflow > 0:
        columns = [
            replace(col, width=max(MIN_NAME_WIDTH, col.width - overflow)) if col.key == 'name' else col
            for col in columns
        ]
    return Table(columns=tuple(columns), start_x=start_x, width=sum(col.width for col in columns))


def format_date(day):
    return f"{day.day}/{day.month}/{day.year}".translate(ARABIC_DIGITS)


def _centered(font, text, x, width, y, size):
    return TextRun(text, x + (width - font.width(text, size)) / 2, y, size)


def _cells(table, y, values, font, size):
    boxes = []
    texts = []
    x = table.start_x
    for col, value in zip(table.columns, values):
        boxes.append(Box(x, y - ROW_HEIGHT, col.width, ROW_HEIGHT))
        texts.append(_centered(font, value, x, col.width, y - BASELINE_OFFSET, size))
        x += col.width
    return tuple(boxes), tuple(texts)


def title_band(cursor, font, today):
    title_width = font.width(REPORT_TITLE, TITLE_SIZE)
    title_x = min(PAGE_WIDTH - MARGIN - title_width, PAGE_WIDTH - SAFE_MARGIN - title_width)
    date_text = f"{DATE_LABEL}: {format_date(today)}"
    texts = (
        TextRun(REPORT_TITLE, title_x, cursor.y + 20, TITLE_SIZE),
        TextRun(date_text, max(MARGIN, SAFE_MARGIN), cursor.y + 10, DATE_SIZE),
    )
    return Band(TITLE, cursor.page, (), texts)


def header_band(table, cursor, font):
    boxes, texts = _cells(table, cursor.y, [col.title for col in table.columns], font, HEADER_SIZE)
    return Band(HEADER, cursor.page, boxes, texts)


def group_band(table, cursor, font, classroom):
    box = Box(table.start_x, cursor.y - ROW_HEIGHT, table.width, ROW_HEIGHT, shaded=True)
    label = f"{CLASSROOM_LABEL}: {classroom}"
    text = _centered(font, label, table.start_x, table.width, cursor.y - BASELINE_OFFSET, GROUP_SIZE)
    return Band(GROUP, cursor.page, (box,), (text,))


def row_band(table, cursor, font, row):
    values = [format_value(getattr(row, col.key)) for col in table.columns]
    boxes, texts = _cells(table, cursor.y, values, font, CELL_SIZE)
    return Band(ROW, cursor.page, boxes, texts)


def layout_report(rows, font, today=None, table=None):
    """
    Yields the bands of the report in drawing order.

    A shaded classroom header (preceded by one blank row of spacing) opens
    every run of rows sharing a classroom. When less than one row of space is
    left above the bottom margin, the next row starts a new page; neither the
    column headers nor the current classroom header are repeated there.
    """
    today = today or date.today()
    table = table or table_geometry()

    cursor = Cursor(page=0, y=PAGE_HEIGHT - MARGIN - HEADER_HEIGHT)
    yield title_band(cursor, font, today)
    cursor = cursor.down(TITLE_GAP)

    yield header_band(table, cursor, font)
    cursor = cursor.down(ROW_HEIGHT)

    for row in rows:
        if cursor.y < MARGIN + ROW_HEIGHT:
            cursor = cursor.next_page()

        if row.classroom != cursor.classroom:
            cursor = cursor.down(ROW_HEIGHT)
            yield group_band(table, cursor, font, row.classroom)
            cursor = replace(cursor.down(ROW_HEIGHT), classroom=row.classroom)

        yield row_band(table, cursor, font, row)
        cursor = cursor.down(ROW_HEIGHT)
