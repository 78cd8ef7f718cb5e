"""Bundle CLI commands."""

import argparse
import sys


def cmd_bundle_build(args: argparse.Namespace) -> int:
    from dualmod.bundle import BundleConfig, BundleError, run_bundle

    config = BundleConfig(
        entry=args.entry,
        outfile=args.outfile,
        tsconfig=args.tsconfig or None,
        target=args.target,
    )
    try:
        result = run_bundle(config, cwd=args.project, dry_run=args.dry_run)
    except BundleError as e:
        print(f"ERROR [{e.kind}] {e}", file=sys.stderr)
        return 1

    print(f"  {' '.join(result['command'])}")
    if result["dry_run"]:
        print("\n[DRY RUN] esbuild was not run.")
    else:
        print(f"  Wrote {config.outfile}")
    return 0
