"""Marker block discovery.

A marker block is a named region of a source file bounded by two sentinel
lines:

    // begin marker dirname
    const _dirname = path.dirname(fileURLToPath(import.meta.url));
    // end marker dirname

A sentinel must stand alone on its line apart from comment punctuation,
so any comment syntax works but a string literal such as
``"begin marker X"`` inside code is not a sentinel. Whitespace between
sentinel keywords is tolerant, the name and keywords are case-sensitive.
A block closes at the nearest later end sentinel carrying the same name,
which lets distinct blocks share a file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from dualmod.rewrite.errors import DuplicateMarker, PlanError, UnterminatedMarker

_NAME = r"(?P<name>\w+(?:[.:-]\w+)*)"
# Comment punctuation allowed around a sentinel: no words, no quotes.
_DECORATION = r"[^\w\"'`\n]*"


@dataclass(frozen=True)
class SentinelStyle:
    """Begin/end sentinel templates, each containing a ``{name}`` placeholder."""

    begin: str = "begin marker {name}"
    end: str = "end marker {name}"

    def __post_init__(self) -> None:
        for template in (self.begin, self.end):
            if template.count("{name}") != 1:
                raise PlanError(f"sentinel template {template!r} needs exactly one {{name}}")
        if _compile(self.begin).pattern == _compile(self.end).pattern:
            raise PlanError("begin and end sentinel templates must differ")

    @property
    def begin_re(self) -> re.Pattern:
        return _compile(self.begin)

    @property
    def end_re(self) -> re.Pattern:
        return _compile(self.end)

    def begin_marker(self, name: str) -> str:
        return self.begin.replace("{name}", name)

    def end_marker(self, name: str) -> str:
        return self.end.replace("{name}", name)


@lru_cache(maxsize=None)
def _compile(template: str) -> re.Pattern:
    head, _, tail = template.partition("{name}")
    pattern = (
        rf"^{_DECORATION}(?<!\w)"
        + _keywords(head)
        + _NAME
        + _keywords(tail)
        + rf"(?!\w){_DECORATION}$"
    )
    return re.compile(pattern)


def _keywords(part: str) -> str:
    # Any run of whitespace in a template matches any run in the file.
    return "".join(
        r"\s+" if piece.isspace() else re.escape(piece)
        for piece in re.split(r"(\s+)", part)
        if piece
    )


DEFAULT_STYLE = SentinelStyle()
LEGACY_STYLE = SentinelStyle(
    begin="__START__REPLACE__{name}__",
    end="__END__REPLACE__{name}__",
)
STYLES = {"default": DEFAULT_STYLE, "legacy": LEGACY_STYLE}


@dataclass(frozen=True)
class MarkerBlock:
    """A discovered block.

    ``start_offset``/``end_offset`` cover both sentinel lines; the end
    sentinel's line terminator is outside the span. ``body_start`` and
    ``body_end`` delimit ``original_body``, the text strictly between the
    sentinel lines.
    """

    name: str
    start_offset: int
    end_offset: int
    body_start: int
    body_end: int
    original_body: str
    line: int
    end_line: int


def iter_lines(text: str):
    """Yield ``(line_no, offset, content, terminator)`` for each line of text."""
    offset = 0
    line_no = 1
    size = len(text)
    while offset < size:
        nl = text.find("\n", offset)
        if nl == -1:
            yield line_no, offset, text[offset:], ""
            return
        content = text[offset:nl]
        terminator = "\n"
        if content.endswith("\r"):
            content = content[:-1]
            terminator = "\r\n"
        yield line_no, offset, content, terminator
        offset = nl + 1
        line_no += 1


def find_markers(text: str, style: SentinelStyle = DEFAULT_STYLE) -> list[MarkerBlock]:
    """Scan text for marker blocks.

    Returns:
        Blocks ordered by position in the text.

    Raises:
        DuplicateMarker: A name has more than one start sentinel.
        UnterminatedMarker: A start sentinel has no later end sentinel.
    """
    begins: dict[str, list[tuple[int, int, int]]] = {}
    ends: dict[str, list[tuple[int, int, int]]] = {}

    for line_no, offset, content, terminator in iter_lines(text):
        m = style.begin_re.search(content)
        if m:
            body_start = offset + len(content) + len(terminator)
            begins.setdefault(m.group("name"), []).append((line_no, offset, body_start))
            continue
        m = style.end_re.search(content)
        if m:
            ends.setdefault(m.group("name"), []).append(
                (line_no, offset, offset + len(content))
            )

    for name, starts in begins.items():
        if len(starts) > 1:
            raise DuplicateMarker(name, [s[0] for s in starts])

    blocks = []
    for name, [(line_no, start, body_start)] in begins.items():
        closing = next((e for e in ends.get(name, []) if e[0] > line_no), None)
        if closing is None:
            raise UnterminatedMarker(name, line_no)
        end_line, body_end, end = closing
        blocks.append(MarkerBlock(
            name=name,
            start_offset=start,
            end_offset=end,
            body_start=body_start,
            body_end=body_end,
            original_body=text[body_start:body_end],
            line=line_no,
            end_line=end_line,
        ))

    blocks.sort(key=lambda b: b.start_offset)
    return blocks
