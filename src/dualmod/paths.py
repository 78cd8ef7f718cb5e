"""Project path resolution.

Resolves the files the build helpers operate on. Uses environment
variables when available, falls back to conventional defaults relative
to the project root.

Environment variables:
    DUALMOD_PROJECT_DIR — project root (default: current directory)
    DUALMOD_PLAN — rewrite plan file (default: <project>/dualmod.yaml)
    DUALMOD_ESBUILD — esbuild executable (default: local node_modules, then PATH)
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

_DEFAULT_PLAN_NAME = "dualmod.yaml"
_LOCAL_ESBUILD = Path("node_modules") / ".bin" / "esbuild"


def project_root() -> Path:
    """Return the project root directory."""
    env = os.environ.get("DUALMOD_PROJECT_DIR")
    if env:
        return Path(env)
    return Path.cwd()


def plan_path() -> Path:
    """Return the path to the default rewrite plan."""
    env = os.environ.get("DUALMOD_PLAN")
    if env:
        return Path(env)
    return project_root() / _DEFAULT_PLAN_NAME


def esbuild_executable(root: Path | None = None) -> str | None:
    """Return the esbuild executable to run, or None if none can be found."""
    env = os.environ.get("DUALMOD_ESBUILD")
    if env:
        return env
    local = (root or project_root()) / _LOCAL_ESBUILD
    if local.is_file():
        return str(local)
    return shutil.which("esbuild")
