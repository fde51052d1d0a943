"""Whole-course purchases."""
