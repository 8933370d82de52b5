"""Tests for prompt templates."""

import pytest

from munger_mcp.models import MEMO_SECTION_TITLES, MemoSection
from munger_mcp.prompts.templates import (
    SECTION_INSTRUCTIONS,
    get_prompt,
    list_prompts,
    memo_section_prompts,
    memo_summary_prompts,
)


class TestMcpPrompts:
    """Tests for the MCP prompt registry."""

    def test_list(self) -> None:
        assert {p["name"] for p in list_prompts()} == {"munger_analysis", "investment_memo"}

    @pytest.mark.parametrize("name,tool", [("munger_analysis", "analyze_munger"), ("investment_memo", "investment_memo")])
    def test_get_fills_ticker(self, name, tool) -> None:
        result = get_prompt(name, {"ticker": "AAPL"})

        content = result["messages"][0]["content"]
        assert result["messages"][0]["role"] == "user"
        assert f'{tool}("AAPL")' in content

    def test_unknown(self) -> None:
        assert get_prompt("nope", {"ticker": "AAPL"}) is None


class TestMemoPrompts:
    """Tests for memo section and summary prompts."""

    def test_instructions_cover_every_section(self) -> None:
        assert set(SECTION_INSTRUCTIONS) == set(MEMO_SECTION_TITLES)

    def test_section_prompt(self) -> None:
        system, user = memo_section_prompts("Financial Analysis", "Apple Inc.", "AAPL", {"market_cap": 3e12})

        assert "Apple Inc. (AAPL)" in system
        assert user.startswith('Write the "Financial Analysis" section')
        assert '"market_cap": 3000000000000.0' in user
        assert "Cite the data set" in user

    def test_section_prompt_without_sources(self) -> None:
        _, user = memo_section_prompts("Growth Prospects", "Apple Inc.", "AAPL", {}, include_sources=False)
        assert "Cite the data set" not in user

    def test_summary_prompt_orders_sections(self) -> None:
        sections = [MemoSection(title="B", content="two"), MemoSection(title="A", content="one")]
        _, user = memo_summary_prompts("Apple Inc.", "AAPL", sections)

        assert user.index("## B") < user.index("## A")
