"""Rewrite rules used when producing the CommonJS build.

The ES-module source computes its own directory from ``import.meta.url``
and loads native bindings through ``createRequire``. Neither exists under
CommonJS, where the loader provides ``__dirname`` and ``require``
directly:

- ``DIRNAME`` binds ``_dirname`` straight from ``__dirname``.
- ``REQUIRE`` is emptied.

Both rules keep their sentinels so the plan can be applied again.
"""

from __future__ import annotations

from dualmod.rewrite.markers import LEGACY_STYLE, SentinelStyle
from dualmod.rewrite.plan import RewritePlan, RewriteRule

DIRNAME_MARKER = "DIRNAME"
REQUIRE_MARKER = "REQUIRE"


def cjs_rules(
    dirname_marker: str = DIRNAME_MARKER,
    require_marker: str = REQUIRE_MARKER,
    variable: str = "_dirname",
) -> tuple[RewriteRule, ...]:
    return (
        RewriteRule(
            name=dirname_marker,
            replacement=f"const {variable} = __dirname;",
            keep_sentinels=True,
        ),
        RewriteRule(name=require_marker, replacement="", keep_sentinels=True),
    )


def cjs_plan(style: SentinelStyle = LEGACY_STYLE, strict: bool = True) -> RewritePlan:
    """The CommonJS plan, by default matching ``__START__REPLACE__<NAME>__`` sentinels."""
    return RewritePlan(rules=cjs_rules(), style=style, strict=strict)


PRESETS = {"cjs": cjs_plan}
