"""Tests for the run_payroll command-line entry point."""

import sys
from pathlib import Path

from payroll_config import DEFAULT_VERSION
from scripts.run_payroll import build_parser, main

SAMPLE = Path(__file__).resolve().parent.parent / "scripts" / "sample_payroll.yaml"


class TestRatesOption:
    """--rates defaults to the shipped rate-table version and says so."""

    def test_default_is_shipped_version(self):
        args = build_parser().parse_args(["input.yaml"])
        assert args.rates == DEFAULT_VERSION == "jp_2024"

    def test_help_names_actual_default(self):
        help_text = build_parser().format_help()
        assert "(default: jp_2024)" in help_text
        assert "latest" not in help_text

    def test_explicit_version_kept(self):
        args = build_parser().parse_args(["input.yaml", "--rates", "jp_2025"])
        assert args.rates == "jp_2025"


class TestMain:

    def test_sample_file_with_default_rates(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["run_payroll.py", str(SAMPLE)])

        assert main() == 0

        out = capsys.readouterr().out
        assert "# E001" in out
        assert "手取り額: 280,716円" in out

    def test_unknown_rates_version(self, monkeypatch, capsys):
        monkeypatch.setattr(
            sys, "argv", ["run_payroll.py", str(SAMPLE), "--rates", "jp_1999"]
        )

        assert main() == 2
        assert "Cannot load rate tables" in capsys.readouterr().err
