"""Pure marker-block rewriting: ``(text, plan) -> text'``.

Applying a plan twice is idempotent only when the replacements do not
reintroduce the sentinels the plan targets. Rules with ``keep_sentinels``
leave the sentinels in place, so a second run matches them again and
writes the same body. Rules without them remove the block, so a second
run raises MarkerNotFound (strict) or reports UnusedRuleWarning.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field

from dualmod.rewrite.errors import MarkerNotFound, OverlappingMarkers, UnusedRuleWarning
from dualmod.rewrite.markers import MarkerBlock, find_markers
from dualmod.rewrite.plan import RewritePlan, RewriteRule


@dataclass
class RewriteResult:
    """Result of applying a plan to one text."""

    text: str
    replaced: list[str] = field(default_factory=list)
    warnings: list[UnusedRuleWarning] = field(default_factory=list)


def rewrite_text(text: str, plan: RewritePlan) -> RewriteResult:
    """Apply every rule in the plan to text.

    Raises:
        DuplicateMarker, UnterminatedMarker: The text is malformed.
        MarkerNotFound: A rule's marker is absent and the plan is strict.
        OverlappingMarkers: Two targeted blocks overlap.
    """
    if not plan.rules:
        return RewriteResult(text=text)

    blocks = {b.name: b for b in find_markers(text, plan.style)}

    targets: list[tuple[MarkerBlock, RewriteRule]] = []
    result = RewriteResult(text=text)
    for rule in plan.rules:
        block = blocks.get(rule.name)
        if block is None:
            if plan.strict:
                raise MarkerNotFound(rule.name)
            warning = UnusedRuleWarning(rule.name)
            warnings.warn(warning, stacklevel=2)
            result.warnings.append(warning)
            continue
        targets.append((block, rule))

    targets.sort(key=lambda t: t[0].start_offset)
    for (prev, _), (block, _) in zip(targets, targets[1:]):
        if block.start_offset < prev.end_offset:
            raise OverlappingMarkers(prev.name, block.name)

    pieces = []
    cursor = 0
    for block, rule in targets:
        pieces.append(text[cursor:block.start_offset])
        pieces.append(_render(text, block, rule))
        cursor = block.end_offset
        result.replaced.append(rule.name)
    pieces.append(text[cursor:])

    result.text = "".join(pieces)
    return result


def _render(text: str, block: MarkerBlock, rule: RewriteRule) -> str:
    if not rule.keep_sentinels:
        return rule.replacement
    head = text[block.start_offset:block.body_start]
    # The body ends with the start sentinel's own line ending.
    newline = "\r\n" if head.endswith("\r\n") else "\n"
    body = rule.replacement
    if body.endswith("\r\n"):
        body = body[:-2] + newline
    elif body.endswith("\n"):
        body = body[:-1] + newline
    elif body:
        body += newline
    return head + body + text[block.body_end:block.end_offset]
