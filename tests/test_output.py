"""Tests for rendering and writing analyses."""

from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from oneiromancer.errors import InputFileError
from oneiromancer.models import AnalysisResult, FunctionAnalysis
from oneiromancer.output import AnalysisWriter, format_description, output_path, render_analysis, write_analyses
from oneiromancer.rewriter import rewrite


def _analysis(index=0, source="int v1;\n", name="f", variables=None, description="Does f things."):
    result = AnalysisResult(description=description, suggested_name=name, variables=variables or {})
    return FunctionAnalysis(index=index, source=source, result=result, outcome=rewrite(source, result.variables))


class TestFormatDescription:
    """Test the block comment placed above each function."""

    def test_layout(self):
        assert format_description("sum_bytes", "Adds bytes.") == "/*\n * sum_bytes()\n *\n * Adds bytes.\n */\n\n"

    def test_wraps_at_width(self):
        text = format_description("f", "word " * 60)
        lines = text.rstrip("\n").splitlines()
        assert all(len(line) <= 76 for line in lines)
        assert all(line.startswith(" *") or line == "/*" for line in lines)
        assert len(lines) > 6

    def test_comment_terminator_escaped(self):
        text = format_description("f", "Parses a /* comment */ token.")
        assert text.count("*/") == 1
        assert text.endswith(" */\n\n")

    def test_comment_terminator_in_name_escaped(self):
        text = format_description("f*/evil", "Does things.")
        assert text.count("*/") == 1
        assert " * f* /evil()" in text


def test_output_path():
    assert output_path(Path("/tmp/target.c")) == Path("/tmp/target.out.c")
    assert output_path(Path("dump")) == Path("dump.out.c")


class TestAnalysisWriter:
    """Test writing improved pseudo-code files."""

    def test_lazy_creation(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        with AnalysisWriter(dest) as writer:
            assert not dest.exists()
            assert writer.written == 0
        assert not dest.exists()

    def test_writes_description_and_rewritten_code(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        with AnalysisWriter(dest) as writer:
            writer.write(_analysis(name="init_counter", variables={"v1": "counter"}))

        content = dest.read_text()
        assert content.startswith("/*\n * init_counter()\n")
        assert content.endswith("int counter;\n")

    def test_multiple_functions_in_order(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        with AnalysisWriter(dest) as writer:
            writer.write(_analysis(0, name="first"))
            writer.write(_analysis(1, name="second"))
            assert writer.written == 2

        content = dest.read_text()
        assert content.index("first()") < content.index("second()")
        assert "int v1;\n\n/*\n * second()" in content

    def test_separator_written_above_description(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        separator = "//----- (0000000140001000) " + "-" * 20
        with AnalysisWriter(dest) as writer:
            writer.write(_analysis(0, name="first"), separator)
            writer.write(_analysis(1, name="second"))

        content = dest.read_text()
        assert content.startswith(separator + "\n/*\n * first()\n")
        assert content.count("0000000140001000") == 1

    def test_refuses_existing_file(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        dest.write_text("keep me")
        with pytest.raises(InputFileError, match="--overwrite"):
            with AnalysisWriter(dest) as writer:
                writer.write(_analysis())
        assert dest.read_text() == "keep me"

    def test_overwrite(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        dest.write_text("old")
        with AnalysisWriter(dest, overwrite=True) as writer:
            writer.write(_analysis())
        assert "old" not in dest.read_text()

    def test_write_analyses(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        count = write_analyses(dest, [_analysis(0, name="first"), _analysis(1, name="second")])
        assert count == 2
        assert dest.read_text().count("int v1;") == 2

    def test_write_analyses_nothing_to_write(self, temp_dir):
        dest = temp_dir / "sample.out.c"
        assert write_analyses(dest, []) == 0
        assert not dest.exists()


class TestRenderAnalysis:
    """Test terminal rendering."""

    def _render(self, analysis, **kwargs) -> str:
        buffer = StringIO()
        console = Console(file=buffer, width=120, force_terminal=False, color_system=None)
        render_analysis(console, analysis, **kwargs)
        return buffer.getvalue()

    def test_description_and_table(self):
        output = self._render(_analysis(name="init", variables={"v1": "counter"}))
        assert " * init()" in output
        assert "Variable renaming suggestions" in output
        assert "counter" in output

    def test_no_suggestions(self):
        output = self._render(_analysis())
        assert "No variable renaming suggestions" in output

    def test_unmatched_and_dropped_warnings(self):
        result = AnalysisResult(description="d", suggested_name="f", variables={"ghost": "phantom", "v1": "9bad"})
        outcome = rewrite("int v1;", result.variables)
        analysis = FunctionAnalysis(index=0, source="int v1;", result=result, outcome=outcome)
        output = self._render(analysis)
        assert "Not all suggested renames were found in the text: ghost" in output
        assert "Ignored 1 malformed" in output

    def test_brackets_in_description_not_treated_as_markup(self):
        output = self._render(_analysis(description="Reads a1[i] into [bold]v2[/bold]."))
        assert "a1[i]" in output
        assert "[bold]v2[/bold]" in output

    def test_show_code(self):
        output = self._render(_analysis(variables={"v1": "counter"}), show_code=True)
        assert "int counter;" in output
