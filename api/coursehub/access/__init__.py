"""Access resolution: who may open which chapter."""

from coursehub.access.policy import (
    AccessDecision,
    CourseAccessSnapshot,
    DenialReason,
    PolicyMode,
    decide_chapter_access,
    resolve_policy_mode,
)


__all__ = [
    "AccessDecision",
    "CourseAccessSnapshot",
    "DenialReason",
    "PolicyMode",
    "decide_chapter_access",
    "resolve_policy_mode",
]
