"""Tests for the Directive Extractor and Param Tokenizer."""

import pytest

from directive_kernel.errors import ParseError
from directive_kernel.parsing.extractor import extract_directives, strip_directives
from directive_kernel.parsing.tokenizer import tokenize


class TestExtractor:
    def test_extracts_bodies_in_order(self):
        text = (
            "Sure, on it. [ACTION: CREATE_TASK | title: Call Dani] "
            "and [ACTION: NAVIGATE_TO_PAGE | page: Tasks]"
        )
        assert extract_directives(text) == [
            "CREATE_TASK | title: Call Dani",
            "NAVIGATE_TO_PAGE | page: Tasks",
        ]

    def test_adjacent_directives_are_not_merged(self):
        text = "[ACTION: A | x: 1][ACTION: B | y: 2]"
        assert extract_directives(text) == ["A | x: 1", "B | y: 2"]

    def test_unclosed_marker_yields_nothing(self):
        assert extract_directives("Working on it [ACTION: CREATE_TASK | title: x") == []

    def test_marker_is_case_sensitive(self):
        assert extract_directives("[action: CREATE_TASK | title: x]") == []

    def test_empty_text(self):
        assert extract_directives("") == []
        assert strip_directives("") == ""

    def test_malformed_body_is_still_extracted(self):
        assert extract_directives("[ACTION: no pipes here]") == ["no pipes here"]

    def test_strip_removes_directives_for_display(self):
        text = "Sure! [ACTION: NAVIGATE_TO_PAGE | page: Clients] Done."
        assert strip_directives(text) == "Sure! Done."

    def test_strip_keeps_text_without_directives(self):
        assert strip_directives("Just a normal answer.") == "Just a normal answer."

    def test_strip_keeps_indentation_and_spacing(self):
        text = "Steps:\n    1. call  Dani\n[ACTION: NAVIGATE_TO_PAGE | page: Clients]"
        assert strip_directives(text) == "Steps:\n    1. call  Dani"

    def test_strip_drops_lines_holding_only_directives(self):
        text = (
            "Plan:\n"
            "  - review\n"
            "[ACTION: CREATE_TASK | title: Review]\n"
            "  - send\tplans"
        )
        assert strip_directives(text) == "Plan:\n  - review\n  - send\tplans"

    def test_strip_joins_adjacent_directives_into_one_gap(self):
        text = "Done [ACTION: A | x: 1][ACTION: B | y: 2] here."
        assert strip_directives(text) == "Done here."

    def test_rescanning_stripped_text_finds_nothing(self):
        texts = [
            "a [ACTION: A | x: 1] b [ACTION: B | y: 2] c",
            "[ACTION: [ACTION: B | y: 2]| c: d]",
            "[ACTION: A | x: 1][ACTION: B | y: 2][ACTION: oops",
        ]
        for text in texts:
            assert extract_directives(strip_directives(text)) == []


class TestTokenizer:
    def test_type_and_params(self):
        directive = tokenize("CREATE_TASK | title: Review contract | priority: גבוהה")
        assert directive.type == "CREATE_TASK"
        assert directive.params == {"title": "Review contract", "priority": "גבוהה"}

    def test_value_keeps_embedded_colon(self):
        directive = tokenize("SCHEDULE_MEETING | time: 14:30")
        assert directive.params["time"] == "14:30"

    def test_params_keep_body_order(self):
        directive = tokenize("UPDATE_CLIENT | phone: 050 | client_name: Dani | email: d@x.com")
        assert list(directive.params) == ["phone", "client_name", "email"]

    def test_first_duplicate_key_wins(self):
        directive = tokenize("CREATE_TASK | title: First | title: Second")
        assert directive.params == {"title": "First"}

    def test_segments_without_colon_are_discarded(self):
        directive = tokenize("CREATE_TASK | just words | title: Kept")
        assert directive.params == {"title": "Kept"}

    def test_empty_segments_and_whitespace(self):
        directive = tokenize("  CREATE_TASK ||  title :  Spaced out  | ")
        assert directive.type == "CREATE_TASK"
        assert directive.params == {"title": "Spaced out"}

    def test_empty_key_is_discarded(self):
        directive = tokenize("CREATE_TASK | : orphan | title: x")
        assert directive.params == {"title": "x"}

    def test_unknown_type_passes_through(self):
        directive = tokenize("FLY_TO_MOON | speed: fast")
        assert directive.type == "FLY_TO_MOON"
        assert directive.directive_type is None

    def test_raw_params_kept(self):
        directive = tokenize(" NAVIGATE_TO_PAGE | page: Clients ")
        assert directive.raw_params == "NAVIGATE_TO_PAGE | page: Clients"

    def test_no_params_is_parse_error(self):
        with pytest.raises(ParseError):
            tokenize("CREATE_TASK")
        with pytest.raises(ParseError):
            tokenize("CREATE_TASK | no colon here")

    def test_no_type_is_parse_error(self):
        with pytest.raises(ParseError):
            tokenize("")
        with pytest.raises(ParseError):
            tokenize(" | | ")
