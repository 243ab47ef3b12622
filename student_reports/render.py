import io
import logging

import arabic_reshaper
from bidi.algorithm import get_display
from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from .config import FONT_NAME, GROUP_SHADE, PAGE_HEIGHT, PAGE_WIDTH

logger = logging.getLogger(__name__)


class ReportFont:
    """
    A font registered with ReportLab, plus the Arabic shaping applied to every
    string before it is measured or drawn.
    """

    def __init__(self, name):
        self.name = name

    def display(self, text):
        # Joined letter forms, reordered right-to-left for a left-to-right canvas.
        return get_display(arabic_reshaper.reshape(str(text)))

    def width(self, text, size):
        return pdfmetrics.stringWidth(self.display(text), self.name, size)


def load_font(path, name=FONT_NAME):
    """Registers a TrueType font file with ReportLab."""
    pdfmetrics.registerFont(TTFont(name, path))
    logger.info("Registered font %s from %s", name, path)
    return ReportFont(name)


def _prepare(c):
    c.setStrokeColor(colors.black)
    c.setLineWidth(1)


def draw_report(bands, font):
    """
    Draws laid-out bands onto A4 pages.

    Returns (pdf_bytes, page_count).
    """
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    _prepare(c)
    shade = colors.Color(GROUP_SHADE, GROUP_SHADE, GROUP_SHADE)

    page = 0
    for band in bands:
        while band.page > page:
            c.showPage()
            _prepare(c)
            page += 1

        for box in band.boxes:
            if box.shaded:
                c.setFillColor(shade)
                c.rect(box.x, box.y, box.width, box.height, stroke=1, fill=1)
            else:
                c.rect(box.x, box.y, box.width, box.height, stroke=1, fill=0)

        c.setFillColor(colors.black)
        for run in band.texts:
            c.setFont(font.name, run.size)
            c.drawString(run.x, run.y, font.display(run.text))

    c.showPage()
    c.save()
    buffer.seek(0)
    return buffer.getvalue(), page + 1
