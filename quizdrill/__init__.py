"""Quizdrill: timed multiple-choice exams and learning mode over a fixed question bank."""

__version__ = "1.0.0"
