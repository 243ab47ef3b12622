"""
Pytest Configuration and Fixtures

Provides common fixtures for all tests including:
- Font resources (a measuring stub and ReportLab's bundled Vera TTF)
- Sample upload rows
- Flask test client
"""

import os

import pytest
import reportlab

from student_reports.app import app
from student_reports.render import load_font

VERA_PATH = os.path.join(os.path.dirname(reportlab.__file__), 'fonts', 'Vera.ttf')


class FakeFont:
    """Measures every character as half the font size wide."""

    name = 'Fake'

    def width(self, text, size):
        return len(str(text)) * size * 0.5

    def display(self, text):
        return str(text)


@pytest.fixture
def fake_font():
    return FakeFont()


@pytest.fixture(scope="session")
def vera_font():
    """ReportLab ships Vera.ttf, so no project font file is needed"""
    return load_font(VERA_PATH, 'TestVera')


@pytest.fixture
def marks_rows():
    """3 mark rows across 2 subjects"""
    return [
        {'المادة': 'رياضيات', 'الاسم الكامل': 'احمد علي', 'المجموع': '85-A'},
        {'المادة': 'علوم', 'الاسم الكامل': 'سارة محمود', 'المجموع': 92},
        {'المادة': 'رياضيات', 'الاسم الكامل': 'يوسف مصطفى', 'المجموع': '1,200'},
    ]


@pytest.fixture
def student_rows():
    """3 roster rows across 2 classrooms, spelled differently from the marks"""
    return [
        {'الاسم المصحح': 'أحمد على', 'الصف': 'ب'},
        {'الاسم المصحح': 'سارة  محمود', 'الصف': 'أ'},
        {'الاسم المصحح': 'يوسف مصطفي', 'الصف': 'ب'},
    ]


@pytest.fixture
def client(vera_font, monkeypatch):
    """Flask test client with the report font already loaded"""
    monkeypatch.setitem(app.config, 'TESTING', True)
    monkeypatch.setitem(app.config, 'REPORT_FONT', vera_font)

    with app.test_client() as test_client:
        yield test_client
