"""Tests for the litprog CLI."""

from __future__ import annotations

import argparse
import json
import shutil
from pathlib import Path

import pytest

from litprog.cli import build_parser, main


@pytest.fixture
def document_path(hello_document_path: Path, tmp_path: Path) -> Path:
    copy = tmp_path / "hello_document.yaml"
    shutil.copy(hello_document_path, copy)
    return copy


# ── Parser Tests ──────────────────────────────────────────────────


class TestBuildParser:
    """Test CLI argument parser construction."""

    def test_returns_argument_parser(self):
        assert isinstance(build_parser(), argparse.ArgumentParser)

    def test_process_subcommand(self):
        args = build_parser().parse_args(["process", "--document", "d.yaml"])
        assert args.command == "process"
        assert args.config is None
        assert args.output_dir is None
        assert args.line_template is None
        assert args.annotated is None

    def test_process_requires_document(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["process"])

    def test_tangle_dry_run_defaults_to_false(self):
        args = build_parser().parse_args(["tangle", "--document", "d.yaml"])
        assert args.dry_run is False

    def test_tangle_accepts_overrides(self):
        args = build_parser().parse_args([
            "tangle", "--document", "d.yaml", "--config", "c.yaml",
            "--output-dir", "gen", "--line-template", "", "--dry-run",
        ])
        assert args.config == "c.yaml"
        assert args.output_dir == "gen"
        assert args.line_template == ""
        assert args.dry_run is True

    def test_weave_requires_output(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["weave", "--document", "d.yaml"])

    def test_list_subcommand(self):
        args = build_parser().parse_args(["list", "--document", "d.yaml"])
        assert args.command == "list"

    def test_verbose_and_quiet_mutually_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-v", "-q", "list", "--document", "d.yaml"])

    def test_no_subcommand_fails(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ── Command Tests ─────────────────────────────────────────────────


class TestMain:
    """Test CLI commands end to end on the hello fixture."""

    def test_usage_error_returns_argparse_code(self):
        assert main([]) == 2

    def test_missing_document(self, tmp_path):
        assert main(["process", "--document", str(tmp_path / "nope.yaml")]) == 1

    def test_missing_config(self, document_path, tmp_path):
        code = main([
            "process", "--document", str(document_path),
            "--config", str(tmp_path / "nope.yaml"),
        ])
        assert code == 1

    def test_process_writes_output_and_annotations(self, document_path, tmp_path):
        annotated = tmp_path / "woven.json"
        code = main([
            "process", "--document", str(document_path), "--annotated", str(annotated),
        ])
        assert code == 0
        assert (tmp_path / "build" / "hello.c").exists()
        blocks = json.loads(annotated.read_text(encoding="utf-8"))["blocks"]
        assert blocks[2]["title"].startswith("greeting code [.nextlink]#")

    def test_config_file_then_attributes_then_flags(self, document_path, config_path, tmp_path):
        # The config file sets outdir, the document attribute overrides it,
        # and the flag overrides both.
        code = main([
            "tangle", "--document", str(document_path), "--config", str(config_path),
            "--output-dir", "flagged",
        ])
        assert code == 0
        output = (tmp_path / "flagged" / "hello.c").read_text(encoding="utf-8")
        assert output.startswith("# line 11 hello.adoc\n")

    def test_line_template_flag_disables_directives(self, document_path, tmp_path):
        code = main(["tangle", "--document", str(document_path), "--line-template", ""])
        assert code == 0
        output = (tmp_path / "build" / "hello.c").read_text(encoding="utf-8")
        assert "#line" not in output

    def test_invalid_config_file(self, document_path, invalid_config_path):
        code = main([
            "tangle", "--document", str(document_path), "--config", str(invalid_config_path),
        ])
        assert code == 1

    def test_tangle_dry_run_writes_nothing(self, document_path, tmp_path):
        code = main(["tangle", "--document", str(document_path), "--dry-run"])
        assert code == 0
        assert not (tmp_path / "build").exists()

    def test_weave_writes_annotations_only(self, document_path, tmp_path):
        output = tmp_path / "woven.json"
        assert main(["weave", "--document", str(document_path), "--output", str(output)]) == 0
        assert output.exists()
        assert not (tmp_path / "build").exists()

    def test_list(self, document_path, capsys):
        assert main(["list", "--document", str(document_path)]) == 0
        out = capsys.readouterr().out
        assert "  hello.c" in out
        assert "  greeting code (2 blocks)" in out
        assert "  return success (1 blocks)" in out

    def test_engine_error_returns_one(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text(
            "blocks:\n"
            "  - style: source\n"
            "    attributes: {output: out.c}\n"
            "    lines: ['<<missing chunk>>']\n",
            encoding="utf-8",
        )
        assert main(["process", "--document", str(path)]) == 1
        assert not (tmp_path / "out.c").exists()
