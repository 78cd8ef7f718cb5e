"""Rewrite rules and plans, and loading plans from YAML or JSON files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from dualmod.rewrite.errors import PlanError
from dualmod.rewrite.markers import DEFAULT_STYLE, STYLES, SentinelStyle


@dataclass(frozen=True)
class RewriteRule:
    """Replace the marker block ``name`` with ``replacement``.

    By default the whole span, sentinels included, is replaced. With
    ``keep_sentinels`` the original sentinel lines stay and only the body
    between them is replaced.
    """

    name: str
    replacement: str = ""
    keep_sentinels: bool = False


@dataclass(frozen=True)
class RewritePlan:
    """An ordered set of rules. Rule order does not affect the output."""

    rules: tuple[RewriteRule, ...] = ()
    style: SentinelStyle = DEFAULT_STYLE
    strict: bool = True

    def __post_init__(self) -> None:
        seen = set()
        for rule in self.rules:
            if rule.name in seen:
                raise PlanError(f"rule for marker '{rule.name}' appears more than once")
            seen.add(rule.name)

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.rules]


def parse_style(raw) -> SentinelStyle:
    """Build a SentinelStyle from a preset name or a {begin, end} mapping."""
    if raw is None:
        return DEFAULT_STYLE
    if isinstance(raw, str):
        if raw not in STYLES:
            raise PlanError(
                f"unknown sentinel style '{raw}' (valid: {', '.join(sorted(STYLES))})"
            )
        return STYLES[raw]
    if isinstance(raw, dict):
        try:
            return SentinelStyle(begin=str(raw["begin"]), end=str(raw["end"]))
        except KeyError as e:
            raise PlanError(f"sentinel style is missing {e}") from e
    raise PlanError(f"sentinel style must be a name or mapping, got {type(raw).__name__}")


def plan_from_dict(data: dict) -> RewritePlan:
    """Build a RewritePlan from parsed configuration data.

    Expected shape::

        style: legacy
        strict: true
        rules:
          - name: DIRNAME
            replacement: "const _dirname = __dirname;"
            keep_sentinels: true
    """
    if not isinstance(data, dict):
        raise PlanError("rewrite plan must be a mapping")

    raw_rules = data.get("rules", []) or []
    if not isinstance(raw_rules, list):
        raise PlanError("'rules' must be a list")

    rules = []
    for i, entry in enumerate(raw_rules):
        if not isinstance(entry, dict) or not entry.get("name"):
            raise PlanError(f"rule #{i + 1} must be a mapping with a 'name'")
        replacement = entry.get("replacement", "")
        if replacement is None:
            replacement = ""
        if not isinstance(replacement, str):
            raise PlanError(f"rule '{entry['name']}': replacement must be a string")
        rules.append(RewriteRule(
            name=str(entry["name"]),
            replacement=replacement,
            keep_sentinels=bool(entry.get("keep_sentinels", False)),
        ))

    return RewritePlan(
        rules=tuple(rules),
        style=parse_style(data.get("style")),
        strict=bool(data.get("strict", True)),
    )


def load_plan(path: Path | str) -> RewritePlan:
    """Load a rewrite plan from a YAML (or JSON) file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file cannot be opened.
        PlanError: If the file is not valid UTF-8 YAML or describes no valid plan.
    """
    plan_path = Path(path)
    with open(plan_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise PlanError(f"{plan_path}: {e}") from e

    if data is None:
        data = {}
    try:
        return plan_from_dict(data)
    except PlanError as e:
        raise PlanError(f"{plan_path}: {e}") from e
