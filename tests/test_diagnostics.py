"""Tests for wren.templating.diagnostics — inline render errors."""

from wren.templating.diagnostics import format_render_error


class TestFormatRenderError:
    def test_includes_type_and_message(self) -> None:
        assert format_render_error(ValueError("boom")) == "ValueError: boom"

    def test_escapes_markup(self) -> None:
        html = format_render_error(ValueError("<script>alert(1)</script>"))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_line_breaks(self) -> None:
        assert format_render_error(ValueError("a\nb\r\nc")) == "ValueError: a<br>b<br>c"

    def test_indentation_becomes_spacer(self) -> None:
        html = format_render_error(ValueError("line\n    indented"))
        assert "<br><span style='display:inline-block;width:32px'></span>indented" in html

    def test_line_marker(self) -> None:
        html = format_render_error(ValueError("3 >> {{ broken }}"))
        assert "3<span style='display:inline-block;width:32px'>&gt;&gt;</span>{{ broken }}" in html
