"""Tests for field extraction strategies."""

import pytest

from governance_agent.parsing.extractor import (
    bracket_group,
    coerce_loose_object,
    direct_quoted_keys,
    extract_record,
    heading_colon_blocks,
    labeled_lines,
    loose_structured_object,
    markdown_blocks,
)
from governance_agent.parsing.fields import (
    FIELDS,
    format_section_name,
    match_heading,
    normalize_key,
)


class TestDirectQuotedKeys:
    """Tests for the single-quoted key strategy."""

    def test_basic_record(self):
        """Scalars and arrays are read straight from quoted keys."""
        text = "'proposal_title':'X','proposal_summary':'Y','problem':'Z','solution':['a','b']"
        record = extract_record(text)

        assert record["proposal_title"] == "X"
        assert record["proposal_summary"] == "Y"
        assert record["problem"] == "Z"
        assert record["solution"] == ["a", "b"]
        assert record["milestones"] == []

    def test_sample_response(self, direct_response):
        """The common generator format yields every present section."""
        record = extract_record(direct_response)

        assert record["proposal_title"] == "Community Builder Grants"
        assert record["solution"] == ["Create a grants council", "Publish quarterly reports"]
        assert record["milestones"] == ["Q1 council elected", "Q2 first grants"]
        assert record["risks"] == ["Low turnout"]
        assert record["references"] == [
            "1. [Forum discussion on grants]",
            "2. [Treasury report 2024]",
        ]

    def test_numbered_references(self):
        """A numbered reference block after the key is renumbered."""
        text = "'proposal_title':'T'\nreferences: 4. [Link A]\n9. [Link B]\n"
        record = direct_quoted_keys(text)
        assert record["references"] == ["1. [Link A]", "2. [Link B]"]

    def test_bullet_list(self):
        """Hyphen bullets after a key become items."""
        text = "'proposal_title':'T'\nrisks:\n- Low turnout\n- Budget over-run\n"
        record = direct_quoted_keys(text)
        assert record["risks"] == ["Low turnout", "Budget over-run"]

    def test_nested_brackets_in_array(self):
        """A ']' inside an item does not end the array."""
        text = "'proposal_title':'T','resources':['Audit [external]','Two devs']"
        record = direct_quoted_keys(text)
        assert record["resources"] == ["Audit [external]", "Two devs"]

    def test_empty_arrays(self):
        """An empty array after a key gives no items."""
        text = "'proposal_title':'X','solution':[],'risks':['r1'],'references':[ ]"
        record = extract_record(text)

        assert record["solution"] == []
        assert record["risks"] == ["r1"]
        assert record["references"] == []

    def test_skipped_for_objects(self):
        """Text starting with '{' is left to the structured strategy."""
        assert direct_quoted_keys("{'proposal_title':'T'}") == {}

    def test_skipped_without_title_key(self):
        """Text without the quoted title key is not handled."""
        assert direct_quoted_keys("'proposal_summary':'S'") == {}

    def test_early_return(self):
        """A found title stops later strategies from running."""
        text = "'proposal_title':'T'\n## Milestones\n- M1\n"
        record = extract_record(text)
        assert record["proposal_title"] == "T"
        assert record["milestones"] == []


class TestLooseStructuredObject:
    """Tests for the structured object strategy."""

    def test_fenced_json(self, json_response):
        """Code fences are stripped and valid JSON is read as-is."""
        record = extract_record(json_response)

        assert record["proposal_title"] == "Validator Rewards Update"
        assert record["proposal_summary"] == "Rebalance validator rewards"
        assert record["solution"] == ["Cap rewards per validator", "Add a small-validator bonus"]
        assert record["metrics"] == ["Nakamoto coefficient"]
        assert record["references"] == ["1. [Validator economics paper]"]
        assert record["outcomes"] == []

    def test_apostrophe_in_json_value(self):
        """Strict JSON is tried first, so apostrophes survive."""
        found = loose_structured_object('{"proposal_title": "Builder\'s Fund"}')
        assert found["proposal_title"] == "Builder's Fund"

    def test_bareword_keys(self):
        """Unquoted keys and single-quoted values are repaired."""
        text = "proposal_title: 'Treasury Reform', proposal_summary: 'Short', solution: ['x', 'y']"
        record = extract_record(text)

        assert record["proposal_title"] == "Treasury Reform"
        assert record["proposal_summary"] == "Short"
        assert record["solution"] == ["x", "y"]

    def test_keys_with_spaces(self):
        """Keys are normalized to lowercase with underscores."""
        found = loose_structured_object('{"Stakeholder Impact": ["Voters"], "Problem": "P"}')
        assert found["stakeholder_impact"] == ["Voters"]
        assert found["problem"] == "P"

    def test_string_references(self):
        """A references string is normalized."""
        found = loose_structured_object('{"references": "[Paper A]\\n[Paper B]"}')
        assert found["references"] == ["1. [Paper A]", "2. [Paper B]"]

    def test_coerce_loose_object(self):
        """Coercion quotes keys, drops trailing commas and wraps in braces."""
        assert coerce_loose_object("title: 'T', items: ['a', 'b',]") == (
            '{"title": "T", "items": ["a", "b"]}'
        )

    def test_non_object_ignored(self):
        """A JSON array is not a record."""
        assert loose_structured_object('["a", "b"]') == {}


class TestLabeledLines:
    """Tests for the labeled-line strategy."""

    def test_labels(self):
        """Scalar labels, bullet lists and bracketed lists are recognised."""
        text = (
            "Title: Community Grants\n"
            "Summary: Fund builders\n"
            "Problem: Builders leave\n"
            "Risks:\n- Low turnout\n- Abuse\n"
            "Metrics: [Active builders, Grants issued]\n"
        )
        record = extract_record(text)

        assert record["proposal_title"] == "Community Grants"
        assert record["proposal_summary"] == "Fund builders"
        assert record["problem"] == "Builders leave"
        assert record["risks"] == ["Low turnout", "Abuse"]
        assert record["metrics"] == ["Active builders", "Grants issued"]

    def test_alternate_labels(self):
        """Synonym labels map to the same section."""
        found = labeled_lines("Executive Summary: Short\nTimeline: [Q1, Q2]\n")
        assert found["proposal_summary"] == "Short"
        assert found["milestones"] == ["Q1", "Q2"]

    def test_labeled_references_numbered(self):
        """Labeled references come back in canonical form."""
        found = labeled_lines("Sources: [Forum post, Whitepaper]\n")
        assert found["references"] == ["1. [Forum post]", "2. [Whitepaper]"]

    def test_empty_label_stays_on_its_line(self):
        """A label with nothing after it does not take the next line."""
        found = labeled_lines("Title:\nSummary: S")

        assert "proposal_title" not in found
        assert found["proposal_summary"] == "S"
        assert extract_record("Title:\nSummary: S")["proposal_title"] == ""


class TestHeadingColonBlocks:
    """Tests for the 'Heading: content' strategy."""

    def test_blocks_run_to_next_heading(self):
        """Block content spans lines until the next known heading."""
        text = (
            "Milestones: Q1 launch\nQ2 review\n"
            "Outcomes: More active builders\n"
            "Implementation: Form council\n- Publish charter"
        )
        record = extract_record(text)

        assert record["milestones"] == ["Q1 launch", "Q2 review"]
        assert record["outcomes"] == ["More active builders"]
        assert record["implementation"] == ["Form council", "Publish charter"]

    def test_heading_inside_word_ignored(self):
        """Heading words inside longer words do not start a block."""
        found = heading_colon_blocks("Risks: Budget overrun in subtitle: none")
        assert found["risks"] == ["Budget overrun in subtitle: none"]
        assert "proposal_title" not in found

    def test_references_block(self):
        """References blocks go through reference normalization."""
        found = heading_colon_blocks("References: [Forum]\n[Paper]")
        assert found["references"] == ["1. [Forum]", "2. [Paper]"]

    def test_bulleted_references_block(self):
        """Bullet markers are dropped before references are numbered."""
        found = heading_colon_blocks("References:\n- [Forum post]\n- [Research paper]")
        assert found["references"] == ["1. [Forum post]", "2. [Research paper]"]


class TestMarkdownBlocks:
    """Tests for the markdown heading strategy."""

    def test_markdown_sections(self, markdown_response):
        """Headings map to sections; lists split on bullets or sentences."""
        record = extract_record(markdown_response)

        assert record["proposal_title"] == "Open Governance Digest"
        assert record["problem"] == "Voters lack information."
        assert record["solution"] == ["Publish digests", "Host calls"]
        assert record["outcomes"] == ["Higher turnout.", "Better decisions."]
        assert record["references"] == ["1. [Forum thread]"]

    def test_unknown_heading_skipped(self):
        """Headings with no matching section are ignored."""
        assert markdown_blocks("## Appendix\nNotes\n") == {}

    def test_sentence_split_drops_numbers(self):
        """Bare numbers left over from numbered prose are dropped."""
        found = markdown_blocks("## Milestones\n1. Launch. 2. Review\n")
        assert found["milestones"] == ["Launch.", "Review."]

    def test_bulleted_references(self):
        """Bulleted reference lists are numbered without their markers."""
        found = markdown_blocks("## References\n- [Forum post]\n- [Research paper]\n")
        assert found["references"] == ["1. [Forum post]", "2. [Research paper]"]


class TestExtractRecord:
    """Tests for the strategy driver."""

    def test_all_keys_present(self):
        """Every section key is present even when nothing matched."""
        record = extract_record("no structure here at all")
        assert set(record) == {spec.key for spec in FIELDS}

    def test_empty_text(self):
        """Blank text gives an empty record."""
        record = extract_record("   ")
        assert record["proposal_title"] == ""
        assert record["solution"] == []

    def test_non_string_raises(self):
        """Non-string input is a caller error."""
        with pytest.raises(TypeError):
            extract_record(None)

    def test_earlier_strategy_wins(self):
        """A later strategy never overwrites a filled section."""
        text = "Title: Labeled Title\n\n## Title\nMarkdown Title\n"
        assert extract_record(text)["proposal_title"] == "Labeled Title"


class TestHelpers:
    """Tests for extraction helpers."""

    def test_bracket_group_balanced(self):
        """The group closes on the matching bracket."""
        text = "x: [a, [b], 'c]'] tail"
        assert bracket_group(text, 3) == "[a, [b], 'c]']"

    def test_bracket_group_unclosed(self):
        """An unclosed group gives None."""
        assert bracket_group("[a, b", 0) is None
        assert bracket_group("abc", 0) is None

    @pytest.mark.parametrize("heading,expected", [
        ("Expected Outcomes", "outcomes"),
        ("Risk Analysis", "risks"),
        ("Impact on Stakeholders", "stakeholder_impact"),
        ("Proposal Summary", "proposal_summary"),
        ("Appendix", None),
    ])
    def test_match_heading(self, heading, expected):
        """Free headings map to canonical keys by marker."""
        assert match_heading(heading) == expected

    def test_normalize_key(self):
        """Structured keys are lowercased with underscores."""
        assert normalize_key("  Success Metrics ") == "success_metrics"

    def test_format_section_name(self):
        """Keys are shown as capitalised words."""
        assert format_section_name("stakeholder_impact") == "Stakeholder Impact"
        assert format_section_name("proposal_title") == "Proposal Title"
