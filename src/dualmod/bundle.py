"""CommonJS bundle of the library entry point via esbuild.

Native addons (``*.node``) cannot be inlined into a JavaScript bundle,
so every path with that extension is marked external and left for the
runtime loader to resolve.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from dualmod.paths import esbuild_executable, project_root

NATIVE_ADDON_FILTER = "*.node"


class BundleError(RuntimeError):
    """esbuild could not be found or exited with an error."""

    kind = "BundleError"


@dataclass
class BundleConfig:
    """The fixed CommonJS pipeline; paths are relative to the project root."""

    entry: str = "./src/index.ts"
    outfile: str = "./lib/index.js"
    tsconfig: str | None = "./tsconfig.cjs.json"
    target: str = "node12"
    platform: str = "node"
    format: str = "cjs"
    external: list[str] = field(default_factory=lambda: [NATIVE_ADDON_FILTER])


def build_command(config: BundleConfig, esbuild: str = "esbuild") -> list[str]:
    """Return the esbuild argv for a config."""
    cmd = [
        esbuild,
        config.entry,
        "--bundle",
        f"--platform={config.platform}",
        f"--format={config.format}",
        f"--target={config.target}",
        f"--outfile={config.outfile}",
    ]
    if config.tsconfig:
        cmd.append(f"--tsconfig={config.tsconfig}")
    for pattern in config.external:
        cmd.append(f"--external:{pattern}")
    return cmd


def run_bundle(
    config: BundleConfig | None = None,
    cwd: Path | str | None = None,
    dry_run: bool = False,
) -> dict:
    """Run esbuild for the config.

    Returns:
        Dict with ``command``, ``cwd``, ``dry_run`` and, when run,
        ``stdout``/``stderr``.

    Raises:
        BundleError: esbuild is missing or the build failed.
    """
    config = config or BundleConfig()
    workdir = Path(cwd) if cwd else project_root()
    esbuild = esbuild_executable(workdir)
    if esbuild is None:
        if not dry_run:
            raise BundleError("esbuild not found (set DUALMOD_ESBUILD or install it locally)")
        esbuild = "esbuild"

    cmd = build_command(config, esbuild)
    result = {"command": cmd, "cwd": str(workdir), "dry_run": dry_run}
    if dry_run:
        return result

    try:
        proc = subprocess.run(cmd, cwd=workdir, capture_output=True, text=True)
    except OSError as e:
        raise BundleError(f"cannot run {esbuild}: {e}") from e
    if proc.returncode != 0:
        raise BundleError(
            f"esbuild exited with {proc.returncode}: {proc.stderr.strip() or proc.stdout.strip()}"
        )
    result["stdout"] = proc.stdout
    result["stderr"] = proc.stderr
    return result
