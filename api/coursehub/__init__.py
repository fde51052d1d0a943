"""CourseHub API - course catalogue and chapter access control."""
