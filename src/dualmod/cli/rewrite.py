"""Rewrite CLI commands."""

import argparse
import sys
import warnings
from dataclasses import replace
from pathlib import Path


def _resolve_plan(args: argparse.Namespace):
    from dualmod.paths import plan_path
    from dualmod.presets import PRESETS
    from dualmod.rewrite.plan import load_plan, parse_style

    if args.preset:
        style = parse_style(args.style or "legacy")
        plan = PRESETS[args.preset](style=style)
    else:
        plan = load_plan(args.plan or plan_path())
        if args.style:
            plan = replace(plan, style=parse_style(args.style))

    if args.lenient:
        plan = replace(plan, strict=False)
    return plan


def cmd_rewrite_apply(args: argparse.Namespace) -> int:
    from dualmod.rewrite.errors import PlanError, RewriteError
    from dualmod.rewrite.sync import rewrite_file

    try:
        plan = _resolve_plan(args)
        # Warnings are reported from the result below.
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            result = rewrite_file(args.file, plan, output=args.output, dry_run=args.dry_run)
    except (RewriteError, PlanError) as e:
        print(f"ERROR [{e.kind}] {args.file}: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"ERROR [PlanError] cannot read plan: {e}", file=sys.stderr)
        return 1

    for w in result["warnings"]:
        print(f"WARNING [UnusedRuleWarning] {args.file}: {w}", file=sys.stderr)

    replaced = ", ".join(result["replaced"]) or "none"
    print(f"  {result['action'].upper()} {result['path']} (replaced: {replaced})")
    if result["dry_run"]:
        print("\n[DRY RUN] No files were modified.")
    return 0


def cmd_rewrite_list(args: argparse.Namespace) -> int:
    from dualmod.rewrite.errors import PlanError, RewriteError
    from dualmod.rewrite.markers import find_markers
    from dualmod.rewrite.plan import parse_style

    try:
        style = parse_style(args.style)
        text = Path(args.file).read_text(encoding="utf-8")
        blocks = find_markers(text, style)
    except (RewriteError, PlanError) as e:
        print(f"ERROR [{e.kind}] {args.file}: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR [IOReadFailure] {args.file}: {e}", file=sys.stderr)
        return 1

    if not blocks:
        print("No marker blocks found.")
        return 0

    print(f"\n  {'Marker':<30} {'Lines':<12} {'Body lines':<10}")
    print(f"  {'─' * 54}")
    for b in blocks:
        body_lines = len(b.original_body.splitlines())
        print(f"  {b.name:<30} {f'{b.line}-{b.end_line}':<12} {body_lines:<10}")
    print(f"\n  {len(blocks)} block(s)")
    return 0
