"""Apply a rewrite plan to a file on disk.

The whole file is read, rewritten in memory, and only then written. On
any error nothing is written. The write goes to a temporary sibling file
which then replaces the target, so an interrupted run never leaves a
half-written file behind.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from dualmod.rewrite.engine import rewrite_text
from dualmod.rewrite.errors import IOReadFailure, IOWriteFailure
from dualmod.rewrite.plan import RewritePlan


def rewrite_file(
    path: Path | str,
    plan: RewritePlan,
    output: Path | str | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Rewrite the marker blocks of one file.

    Args:
        path: Source file (UTF-8).
        plan: Rules to apply.
        output: Write here instead of overwriting ``path``.
        dry_run: Compute the result without writing anything.

    Returns:
        Dict with ``path`` (the file written, or that would be), ``action``
        ("updated", "unchanged" or "created"), ``replaced``, ``warnings``
        and ``dry_run``.
    """
    source = Path(path)
    target = Path(output) if output else source

    try:
        content = _read(source)
    except (OSError, UnicodeDecodeError) as e:
        err = e if isinstance(e, OSError) else OSError(str(e))
        raise IOReadFailure(source, err) from e

    result = rewrite_text(content, plan)

    if target != source and not target.exists():
        action = "created"
    elif target == source and result.text == content:
        action = "unchanged"
    elif target != source and _read_existing(target) == result.text:
        action = "unchanged"
    else:
        action = "updated"

    if action != "unchanged" and not dry_run:
        _write_atomic(target, result.text)

    return {
        "path": str(target),
        "action": action,
        "replaced": result.replaced,
        "warnings": [str(w) for w in result.warnings],
        "dry_run": dry_run,
    }


def _read(path: Path) -> str:
    # newline="" keeps CRLF endings intact.
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _read_existing(path: Path) -> str | None:
    try:
        return _read(path)
    except (OSError, UnicodeDecodeError):
        return None


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _write_atomic(path: Path, text: str) -> None:
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o7777)
        else:
            # mkstemp creates 0600; new files get the usual umask mode.
            os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise IOWriteFailure(path, e) from e
