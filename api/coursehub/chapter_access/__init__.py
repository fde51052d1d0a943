"""Explicit per-chapter access grants."""
