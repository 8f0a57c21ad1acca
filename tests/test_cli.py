"""End-to-end tests for the ``revman`` command (cli/app.py).

Every test runs the real pipeline against ``tests/fixtures/sample.rm5``
with ``--no-color`` so captured output is plain text.

Coverage:
* Tree, JSON, pretty JSON and replicant output.
* Validity report in verify and verbose modes.
* Exit codes and error messages from the error boundary.
"""

from __future__ import annotations

import ast
import io
import json
import re
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from revman_cli.cli import exit_codes
from revman_cli.cli.app import cli, main
from revman_cli.core.models import ParseOptions
from revman_cli.infra.replicant_generator import GRAMMAR_ENV_VAR
from revman_cli.infra.revman_parser import RevManXmlParser


def _run_cli(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli(argv)
    return int(exc_info.value.code)


# ---------------------------------------------------------------------------
# --tree
# ---------------------------------------------------------------------------

class TestTree:
    def test_tree_output(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["--tree", "--no-color", str(sample_path)])
        assert code == exit_codes.SUCCESS
        assert capsys.readouterr().out.splitlines() == [
            "* Antibiotic versus placebo",
            "  - 1.01 Pain at 24 hours (2 studies)",
            "  - 1.02 Duration of fever",
            "    - 1.02.01 Children under 2 (subgroup; 1 studies)",
            "    - 1.02.02 Children 2 and over (subgroup; 2 studies)",
            "  - 1.03 Adverse events",
            "",
            "* Immediate versus delayed antibiotics",
            "  - 2.01 Recurrence (1 studies)",
        ]

    def test_tree_with_studies(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["-t", "--ss", "--no-color", str(sample_path)])
        lines = capsys.readouterr().out.splitlines()
        assert "    - 1.01.01 STD-Smith-2000" in lines
        assert "    - 1.01.02 STD-Jones-2005" in lines
        assert "      - 1.02.01.01 STD-Lee-2010" in lines
        assert "      - 1.02.02.02 STD-Jones-2005" in lines
        assert "    - 2.01.01 STD-Unknown-1999" in lines

    def test_comparison_count_and_labels(
        self, sample_path: Path, sample_text: str, capsys: pytest.CaptureFixture[str],
    ) -> None:
        document = RevManXmlParser().parse(sample_text, ParseOptions()).document
        comparisons = document["analyses_and_data"]["comparison"]

        main(["--tree", "--no-color", str(sample_path)])
        out = capsys.readouterr().out

        headers = [line for line in out.splitlines() if line.startswith("* ")]
        assert len(headers) == len(comparisons)

        labels = re.findall(r"^  - (\d+\.\d+) ", out, flags=re.MULTILINE)
        expected = [
            f"{ci + 1}.{oi + 1:02d}"
            for ci, comparison in enumerate(comparisons)
            for oi, _ in enumerate(comparison["outcome"])
        ]
        assert labels == expected

    def test_tree_has_no_validity_report(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--tree", "--no-color", str(sample_path)])
        assert "RevMan file is valid" not in capsys.readouterr().out


# ---------------------------------------------------------------------------
# --json
# ---------------------------------------------------------------------------

class TestJson:
    def test_compact_round_trip(
        self, sample_path: Path, sample_text: str, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--json", str(sample_path)])
        out = capsys.readouterr().out

        document = RevManXmlParser().parse(sample_text, ParseOptions()).document
        assert json.loads(out) == document

    def test_compact_is_tab_indented_without_trailing_newline(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["-j", str(sample_path)])
        out = capsys.readouterr().out
        assert out.startswith("{\n\t\"")
        assert out.endswith("}")

    def test_pretty_has_same_data(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--json", str(sample_path)])
        compact = json.loads(capsys.readouterr().out)

        main(["--json", "--pretty", "--no-color", str(sample_path)])
        pretty = capsys.readouterr().out

        assert "\x1b[" not in pretty
        assert ast.literal_eval(pretty.strip()) == compact

    def test_json_uses_empty_outcomes(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--json", str(sample_path)])
        document = json.loads(capsys.readouterr().out)
        outcomes = document["analyses_and_data"]["comparison"][0]["outcome"]
        assert outcomes[2]["name"] == "Adverse events"
        assert outcomes[2]["study"] == []


# ---------------------------------------------------------------------------
# --verify / --verbose
# ---------------------------------------------------------------------------

class TestValidityReport:
    def test_verify_prints_warnings_in_order(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["--verify", "--no-color", str(sample_path)])
        assert code == exit_codes.SUCCESS

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == f"{sample_path} - RevMan file is valid (2 warnings):"
        assert lines[1:] == [
            '\t- Outcome 1.03 "Adverse events" has no study data',
            '\t- Outcome 2.01 "Recurrence" references unknown study STD-Unknown-1999',
        ]

    def test_warning_count_matches_parser(
        self, sample_path: Path, sample_text: str, capsys: pytest.CaptureFixture[str],
    ) -> None:
        warnings = RevManXmlParser().parse(
            sample_text, ParseOptions(debug_outcomes=True),
        ).warnings

        main(["--verify", "--no-color", str(sample_path)])
        first = capsys.readouterr().out.splitlines()[0]
        assert f"({len(warnings)} warnings)" in first

    def test_verify_without_warnings(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "clean.rm5"
        path.write_text(
            "<COCHRANE_REVIEW><ANALYSES_AND_DATA/></COCHRANE_REVIEW>", encoding="utf-8",
        )
        main(["--verify", "--no-color", str(path)])
        assert capsys.readouterr().out.splitlines() == [f"{path} - RevMan file is valid"]

    def test_verify_suppresses_rendering(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--verify", "--tree", "--no-color", str(sample_path)])
        out = capsys.readouterr().out
        assert "RevMan file is valid" in out
        assert "* Antibiotic versus placebo" not in out

    def test_verbose_reports_then_renders(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--verbose", "--tree", "--no-color", str(sample_path)])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].endswith("RevMan file is valid (2 warnings):")
        assert lines.index("* Antibiotic versus placebo") == 3


# ---------------------------------------------------------------------------
# --replicant
# ---------------------------------------------------------------------------

class TestReplicant:
    def test_default_grammar(
        self,
        sample_path: Path,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.delenv(GRAMMAR_ENV_VAR, raising=False)
        code = main(["--replicant", "--no-color", str(sample_path)])
        assert code == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert out.startswith("Antibiotics for acute otitis media in children")
        assert "For recurrence, 1 study contributed data." in out

    def test_custom_grammar(
        self, sample_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        grammar = tmp_path / "short.j2"
        grammar.write_text("[{{ revman.title }}]", encoding="utf-8")
        main(["-r", "--grammar", str(grammar), "--no-color", str(sample_path)])
        assert capsys.readouterr().out == "[Antibiotics for acute otitis media in children]\n"

    def test_grammar_from_environment(
        self,
        sample_path: Path,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        grammar = tmp_path / "env.j2"
        grammar.write_text("env grammar", encoding="utf-8")
        monkeypatch.setenv(GRAMMAR_ENV_VAR, str(grammar))
        main(["-r", "--no-color", str(sample_path)])
        assert capsys.readouterr().out == "env grammar\n"

    def test_abstract_keeps_tabs_and_whitespace(
        self, sample_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        grammar = tmp_path / "tabs.j2"
        grammar.write_text("  a\tb  ", encoding="utf-8")
        main(["-r", "--grammar", str(grammar), "--no-color", str(sample_path)])
        assert capsys.readouterr().out == "  a\tb  \n"

    def test_empty_grammar_path_is_missing_grammar(
        self,
        sample_path: Path,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.delenv(GRAMMAR_ENV_VAR, raising=False)
        code = _run_cli(["-r", "--grammar", "", "--no-color", str(sample_path)])
        assert code == exit_codes.GENERAL_ERROR
        assert "Error: Grammar file not found" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_success_exits_zero(self, sample_path: Path) -> None:
        assert _run_cli(["--tree", "--no-color", str(sample_path)]) == exit_codes.SUCCESS

    @pytest.mark.parametrize(
        "argv",
        [[], ["--tree"], ["a.rm5", "b.rm5", "--json"], ["a.rm5"]],
    )
    def test_invalid_invocation_exits_one(
        self, argv: list[str], capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run_cli(argv + ["--no-color"]) == exit_codes.GENERAL_ERROR
        out = capsys.readouterr().out
        assert out.startswith("Error: ")
        assert "Hint: Usage: revman <file>" in out

    @pytest.mark.parametrize(
        "argv",
        [["--no-color"], ["--tree", "--json", "a.rm5", "--no-color"], ["--bogus", "--no-color"]],
    )
    def test_no_color_applies_to_invocation_errors(
        self,
        argv: list[str],
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert _run_cli(argv) == exit_codes.GENERAL_ERROR
        out = capsys.readouterr().out
        assert out.startswith("Error: ")
        assert "\x1b[" not in out

    def test_unencodable_output_is_environment_error(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        path = tmp_path / "accents.rm5"
        path.write_text(
            "<COCHRANE_REVIEW><COVER_SHEET><TITLE>Méta-analyse</TITLE></COVER_SHEET>"
            "<ANALYSES_AND_DATA/></COCHRANE_REVIEW>",
            encoding="utf-8",
        )
        buffer = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(buffer, encoding="ascii"))

        assert _run_cli(["--json", "--no-color", str(path)]) == exit_codes.GENERAL_ERROR
        sys.stdout.flush()
        out = buffer.getvalue().decode("ascii")
        assert "Error: Standard output cannot encode the text (ascii)" in out
        assert "Unexpected error" not in out

    def test_unreadable_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        missing = tmp_path / "missing.rm5"
        assert _run_cli(["--tree", "--no-color", str(missing)]) == exit_codes.GENERAL_ERROR
        assert f"Error: File not found: {missing}" in capsys.readouterr().out

    def test_parse_error_message_verbatim(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "broken.rm5"
        path.write_text("<COCHRANE_REVIEW><A></COCHRANE_REVIEW>", encoding="utf-8")
        assert _run_cli(["--json", "--no-color", str(path)]) == exit_codes.GENERAL_ERROR
        assert "Error: Invalid XML: mismatched tag" in capsys.readouterr().out

    def test_missing_grammar(
        self, sample_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        grammar = tmp_path / "nope.j2"
        code = _run_cli(
            ["--replicant", "--grammar", str(grammar), "--no-color", str(sample_path)],
        )
        assert code == exit_codes.GENERAL_ERROR
        out = capsys.readouterr().out
        assert f"Error: Grammar file not found: {grammar}" in out
        assert "Antibiotics" not in out

    def test_generation_error_after_report_keeps_report(
        self, sample_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        grammar = tmp_path / "needs-authors.j2"
        grammar.write_text("{{ revman.authors }}", encoding="utf-8")
        code = _run_cli(
            ["-r", "-v", "--grammar", str(grammar), "--no-color", str(sample_path)],
        )
        assert code == exit_codes.GENERAL_ERROR
        out = capsys.readouterr().out
        assert "RevMan file is valid" in out
        assert "Error: Document is missing a field required by the grammar" in out

    def test_error_message_markup_is_literal(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        missing = tmp_path / "[red]x[/red].rm5"
        _run_cli(["--tree", "--no-color", str(missing)])
        assert "[red]x[/red].rm5" in capsys.readouterr().out

    def test_unexpected_error_exits_one(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch("revman_cli.cli.app._run", side_effect=RuntimeError("kaboom")):
            code = _run_cli(["--tree", "--no-color", str(sample_path)])
        assert code == exit_codes.GENERAL_ERROR
        assert "RuntimeError: kaboom" in capsys.readouterr().out

    def test_keyboard_interrupt(
        self, sample_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch("revman_cli.cli.app._run", side_effect=KeyboardInterrupt):
            code = _run_cli(["--tree", "--no-color", str(sample_path)])
        assert code == exit_codes.KEYBOARD_INTERRUPT
        assert "Aborted by user." in capsys.readouterr().out
