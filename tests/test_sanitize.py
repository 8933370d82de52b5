"""Tests for text sanitization."""

from munger_mcp.utils.sanitize import sanitize_text, strip_code_fences, strip_think_blocks


class TestSanitizeText:
    """Tests for sanitize_text function."""

    def test_sanitize_none(self) -> None:
        """Test sanitize returns None for None input."""
        assert sanitize_text(None) is None

    def test_sanitize_strips_whitespace(self) -> None:
        assert sanitize_text("  Hello World  ") == "Hello World"

    def test_sanitize_removes_control_chars(self) -> None:
        """Test control characters are removed."""
        assert sanitize_text("Hello\x00World\x1f!") == "HelloWorld!"

    def test_sanitize_removes_carriage_return(self) -> None:
        assert sanitize_text("Hello\rWorld") == "HelloWorld"

    def test_sanitize_keeps_newlines_and_tabs(self) -> None:
        assert sanitize_text("a\nb\tc") == "a\nb\tc"

    def test_sanitize_truncates_long_text(self) -> None:
        """Test long text is truncated."""
        result = sanitize_text("A" * 600, max_length=500)

        assert len(result) == 503  # 500 + "..."
        assert result.endswith("...")


class TestStripThinkBlocks:
    """Tests for strip_think_blocks."""

    def test_removes_block(self) -> None:
        assert strip_think_blocks("<think>\nreasoning\n</think>\n\nAnswer") == "Answer"

    def test_multiple_blocks(self) -> None:
        assert strip_think_blocks("<think>a</think>One <THINK>b</THINK>Two") == "One Two"

    def test_no_block(self) -> None:
        assert strip_think_blocks("  Plain  ") == "Plain"


class TestStripCodeFences:
    """Tests for strip_code_fences."""

    def test_json_fence(self) -> None:
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self) -> None:
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self) -> None:
        assert strip_code_fences(' {"a": 1} ') == '{"a": 1}'
