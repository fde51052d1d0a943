"""Courses, chapters and quizzes."""
