"""Tests for the dualmod CLI.

Covers:
- Parser construction and --help for every command group
- rewrite apply with presets, plan files, output paths and failures
- rewrite list
- bundle build in dry-run mode
"""

import argparse
from pathlib import Path
from unittest.mock import patch

import pytest

from dualmod.cli import build_parser, main

FIXTURES = Path(__file__).parent / "fixtures"
SIMPLE = "A\n// begin marker X\nBODY\n// end marker X\nB"


# ── Parser construction ──────────────────────────────────────────


class TestParserConstruction:
    def test_build_parser_returns_parser(self):
        assert isinstance(build_parser(), argparse.ArgumentParser)

    def test_no_args_shows_help(self, capsys):
        with patch("sys.argv", ["dualmod"]):
            rc = main()
        assert rc == 0
        assert "dualmod" in capsys.readouterr().out

    def test_group_without_subcommand_shows_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["rewrite"])
        assert exc_info.value.code == 0
        assert "apply" in capsys.readouterr().out

    def test_plan_and_preset_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["rewrite", "apply", "f.ts", "--plan", "p.yaml", "--preset", "cjs"])

    @pytest.mark.parametrize("cmd", [
        ["--help"],
        ["rewrite", "--help"],
        ["rewrite", "apply", "--help"],
        ["rewrite", "list", "--help"],
        ["bundle", "--help"],
        ["bundle", "build", "--help"],
    ])
    def test_help_exits_zero(self, cmd):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(cmd)
        assert exc_info.value.code == 0


# ── rewrite apply ────────────────────────────────────────────────


class TestRewriteApply:
    def test_preset_in_place(self, profiler_source, capsys):
        rc = main(["rewrite", "apply", str(profiler_source), "--preset", "cjs"])
        assert rc == 0
        assert "const _dirname = __dirname;" in profiler_source.read_text()
        out = capsys.readouterr().out
        assert "UPDATED" in out
        assert "DIRNAME" in out

    def test_plan_file_with_output(self, profiler_source, tmp_path):
        out = tmp_path / "cjs.ts"
        original = profiler_source.read_text()
        rc = main([
            "rewrite", "apply", str(profiler_source),
            "--plan", str(FIXTURES / "cjs-plan.yaml"),
            "--output", str(out),
        ])
        assert rc == 0
        assert profiler_source.read_text() == original
        assert "createRequire(import.meta.url)" not in out.read_text()

    def test_plan_from_environment(self, profiler_source, monkeypatch):
        monkeypatch.setenv("DUALMOD_PLAN", str(FIXTURES / "cjs-plan.yaml"))
        rc = main(["rewrite", "apply", str(profiler_source)])
        assert rc == 0
        assert "const _dirname = __dirname;" in profiler_source.read_text()

    def test_style_override(self, tmp_path):
        target = tmp_path / "index.ts"
        target.write_text(SIMPLE)
        plan = tmp_path / "plan.yaml"
        plan.write_text("style: legacy\nrules:\n  - name: X\n    replacement: R\n")
        rc = main(["rewrite", "apply", str(target), "--plan", str(plan), "--style", "default"])
        assert rc == 0
        assert target.read_text() == "A\nR\nB"

    def test_dry_run(self, profiler_source, capsys):
        original = profiler_source.read_text()
        rc = main(["rewrite", "apply", str(profiler_source), "--preset", "cjs", "--dry-run"])
        assert rc == 0
        assert profiler_source.read_text() == original
        assert "[DRY RUN]" in capsys.readouterr().out

    def test_missing_marker_fails(self, tmp_path, capsys):
        target = tmp_path / "index.ts"
        target.write_text("nothing to see\n")
        rc = main(["rewrite", "apply", str(target), "--preset", "cjs"])
        assert rc == 1
        err = capsys.readouterr().err
        assert "MarkerNotFound" in err
        assert "DIRNAME" in err

    def test_lenient_warns_and_succeeds(self, tmp_path, capsys):
        target = tmp_path / "index.ts"
        target.write_text("nothing to see\n")
        rc = main(["rewrite", "apply", str(target), "--preset", "cjs", "--lenient"])
        assert rc == 0
        err = capsys.readouterr().err
        assert "UnusedRuleWarning" in err
        assert "REQUIRE" in err

    def test_duplicate_marker_fails_without_writing(self, tmp_path, capsys):
        target = tmp_path / "index.ts"
        text = SIMPLE + "\n// begin marker X\n// end marker X\n"
        target.write_text(text)
        plan = tmp_path / "plan.yaml"
        plan.write_text("rules:\n  - name: X\n    replacement: R\n")
        rc = main(["rewrite", "apply", str(target), "--plan", str(plan)])
        assert rc == 1
        assert "DuplicateMarker" in capsys.readouterr().err
        assert target.read_text() == text

    def test_missing_source_file(self, tmp_path, capsys):
        rc = main(["rewrite", "apply", str(tmp_path / "gone.ts"), "--preset", "cjs"])
        assert rc == 1
        assert "IOReadFailure" in capsys.readouterr().err

    def test_missing_plan_file(self, profiler_source, tmp_path, capsys):
        rc = main([
            "rewrite", "apply", str(profiler_source),
            "--plan", str(tmp_path / "nope.yaml"),
        ])
        assert rc == 1
        assert "PlanError" in capsys.readouterr().err

    def test_bad_plan_file(self, profiler_source, tmp_path, capsys):
        plan = tmp_path / "plan.yaml"
        plan.write_text("rules: 3\n")
        rc = main(["rewrite", "apply", str(profiler_source), "--plan", str(plan)])
        assert rc == 1
        assert "PlanError" in capsys.readouterr().err

    def test_plan_is_a_directory(self, profiler_source, tmp_path, capsys):
        rc = main(["rewrite", "apply", str(profiler_source), "--plan", str(tmp_path)])
        assert rc == 1
        assert "ERROR [PlanError]" in capsys.readouterr().err

    def test_plan_not_utf8(self, profiler_source, tmp_path, capsys):
        plan = tmp_path / "plan.yaml"
        plan.write_bytes(b"rules: \xff\xfe\n")
        original = profiler_source.read_text()
        rc = main(["rewrite", "apply", str(profiler_source), "--plan", str(plan)])
        assert rc == 1
        assert "ERROR [PlanError]" in capsys.readouterr().err
        assert profiler_source.read_text() == original


# ── rewrite list ─────────────────────────────────────────────────


class TestRewriteList:
    def test_lists_blocks(self, capsys):
        rc = main(["rewrite", "list", str(FIXTURES / "cpu_profiler.ts"), "--style", "legacy"])
        assert rc == 0
        out = capsys.readouterr().out
        assert "DIRNAME" in out
        assert "REQUIRE" in out
        assert "2 block(s)" in out

    def test_no_blocks(self, capsys):
        rc = main(["rewrite", "list", str(FIXTURES / "cpu_profiler.ts")])
        assert rc == 0
        assert "No marker blocks found." in capsys.readouterr().out

    def test_unterminated(self, tmp_path, capsys):
        target = tmp_path / "index.ts"
        target.write_text("// begin marker X\n")
        rc = main(["rewrite", "list", str(target)])
        assert rc == 1
        assert "UnterminatedMarker" in capsys.readouterr().err


# ── bundle build ─────────────────────────────────────────────────


class TestBundleBuild:
    def test_dry_run_prints_command(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("DUALMOD_ESBUILD", "/opt/esbuild")
        rc = main(["bundle", "build", "--project", str(tmp_path), "--dry-run"])
        assert rc == 0
        out = capsys.readouterr().out
        assert "/opt/esbuild ./src/index.ts --bundle" in out
        assert "--external:*.node" in out

    def test_empty_tsconfig_is_omitted(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("DUALMOD_ESBUILD", "/opt/esbuild")
        rc = main(["bundle", "build", "--project", str(tmp_path), "--tsconfig", "", "--dry-run"])
        assert rc == 0
        assert "--tsconfig" not in capsys.readouterr().out

    def test_missing_esbuild(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("DUALMOD_ESBUILD", raising=False)
        monkeypatch.setattr("dualmod.paths.shutil.which", lambda name: None)
        rc = main(["bundle", "build", "--project", str(tmp_path)])
        assert rc == 1
        assert "BundleError" in capsys.readouterr().err
