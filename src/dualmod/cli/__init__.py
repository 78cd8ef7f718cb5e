"""Command line for the dual-module build helpers.

Usage:
    dualmod rewrite apply <file> [--plan PLAN | --preset cjs] [--style S]
                                 [--output OUT] [--lenient] [--dry-run]
    dualmod rewrite list <file> [--style S]
    dualmod bundle build [--entry E] [--outfile O] [--tsconfig T]
                         [--target T] [--dry-run]
"""

import argparse
import sys

from dualmod import __version__
from dualmod.bundle import BundleConfig
from dualmod.cli.bundle import cmd_bundle_build
from dualmod.cli.rewrite import cmd_rewrite_apply, cmd_rewrite_list
from dualmod.presets import PRESETS
from dualmod.rewrite.markers import STYLES

_DEFAULTS = BundleConfig()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dualmod",
        description="Build helpers for publishing ESM and CommonJS from one source",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    # rewrite
    rw = sub.add_parser("rewrite", help="Marker-block source rewriting")
    rw_sub = rw.add_subparsers(dest="subcommand")

    apply = rw_sub.add_parser("apply", help="Apply a rewrite plan to a file")
    apply.add_argument("file", help="Source file to rewrite")
    source = apply.add_mutually_exclusive_group()
    source.add_argument(
        "--plan", default=None,
        help="Path to a YAML/JSON rewrite plan (default: $DUALMOD_PLAN or ./dualmod.yaml)",
    )
    source.add_argument(
        "--preset", default=None, choices=sorted(PRESETS),
        help="Use a built-in plan instead of a plan file",
    )
    apply.add_argument(
        "--style", default=None, choices=sorted(STYLES),
        help="Sentinel style (overrides the plan's)",
    )
    apply.add_argument(
        "--output", default=None,
        help="Write the result here and leave the source untouched",
    )
    apply.add_argument(
        "--lenient", action="store_true",
        help="Warn instead of failing when a rule's marker is missing",
    )
    apply.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    ls = rw_sub.add_parser("list", help="List marker blocks in a file")
    ls.add_argument("file")
    ls.add_argument("--style", default=None, choices=sorted(STYLES))

    # bundle
    bun = sub.add_parser("bundle", help="esbuild CommonJS bundle")
    bun_sub = bun.add_subparsers(dest="subcommand")
    build = bun_sub.add_parser("build", help="Bundle the entry point as CommonJS")
    build.add_argument("--project", default=None, help="Project root (default: $DUALMOD_PROJECT_DIR or cwd)")
    build.add_argument("--entry", default=_DEFAULTS.entry)
    build.add_argument("--outfile", default=_DEFAULTS.outfile)
    build.add_argument(
        "--tsconfig", default=_DEFAULTS.tsconfig,
        help="tsconfig for the CommonJS build (empty to omit)",
    )
    build.add_argument("--target", default=_DEFAULTS.target)
    build.add_argument(
        "--dry-run", action="store_true",
        help="Print the esbuild command without running it",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        ("rewrite", "apply"): cmd_rewrite_apply,
        ("rewrite", "list"): cmd_rewrite_list,
        ("bundle", "build"): cmd_bundle_build,
    }

    subcommand: str | None = getattr(args, "subcommand", None)
    handler = dispatch.get((args.command, subcommand or ""))
    if handler:
        return handler(args)

    parser.parse_args([args.command, "--help"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
