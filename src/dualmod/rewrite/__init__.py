"""Marker-block source rewriting.

Source that differs between the ES-module and CommonJS builds is fenced
with sentinel comments:

    // begin marker require
    ...
    // end marker require

A rewrite plan maps marker names to replacement text. Anything outside
the targeted blocks is preserved byte for byte.
"""

from dualmod.rewrite.engine import RewriteResult, rewrite_text
from dualmod.rewrite.errors import (
    DuplicateMarker,
    IOReadFailure,
    IOWriteFailure,
    MarkerError,
    MarkerNotFound,
    OverlappingMarkers,
    PlanError,
    RewriteError,
    UnterminatedMarker,
    UnusedRuleWarning,
)
from dualmod.rewrite.markers import (
    DEFAULT_STYLE,
    LEGACY_STYLE,
    MarkerBlock,
    SentinelStyle,
    find_markers,
)
from dualmod.rewrite.plan import RewritePlan, RewriteRule, load_plan
from dualmod.rewrite.sync import rewrite_file

__all__ = [
    "DEFAULT_STYLE",
    "DuplicateMarker",
    "IOReadFailure",
    "IOWriteFailure",
    "LEGACY_STYLE",
    "MarkerBlock",
    "MarkerError",
    "MarkerNotFound",
    "OverlappingMarkers",
    "PlanError",
    "RewriteError",
    "RewritePlan",
    "RewriteResult",
    "RewriteRule",
    "SentinelStyle",
    "UnterminatedMarker",
    "UnusedRuleWarning",
    "find_markers",
    "load_plan",
    "rewrite_file",
    "rewrite_text",
]
