"""Classroom-grouped PDF reports of student marks."""

__version__ = '1.0.0'
