"""Tests for slidedeck.detect: grammar auto-detection."""

from __future__ import annotations

from slidedeck.detect import _strip_code, detect_grammar

from conftest import LANDSLIDE_DECK, REMARK_DECK


class TestLandslideDetection:
    def test_fx_directive(self):
        assert detect_grammar("# Slide\n.fx: extra-large\n") == "landslide"

    def test_presenter_notes_heading(self):
        assert detect_grammar("# Slide\n\n# Presenter Notes\n\nhi\n") == "landslide"

    def test_sample_deck(self):
        assert detect_grammar(LANDSLIDE_DECK) == "landslide"


class TestRemarkDetection:
    def test_notes_separator(self):
        assert detect_grammar("# Slide\n???\nnotes\n") == "remark"

    def test_leading_class_property(self):
        assert detect_grammar("class: center, middle\n\n# Title\n") == "remark"

    def test_property_after_delimiter(self):
        assert detect_grammar("# One\n---\nlayout: true\n# Two\n") == "remark"

    def test_sample_deck(self):
        assert detect_grammar(REMARK_DECK) == "remark"


class TestFallback:
    def test_plain_markdown_defaults_to_landslide(self):
        assert detect_grammar("# Just a slide\n\nText.\n") == "landslide"

    def test_property_mid_slide_is_not_a_signal(self):
        assert detect_grammar("# Slide\n\nclass: not a property\n") == "landslide"


class TestPriority:
    def test_landslide_directive_wins_over_remark_notes(self):
        assert detect_grammar("# Slide\n.fx: large\n???\nnotes\n") == "landslide"


class TestCodeIgnored:
    def test_css_in_fence_is_not_a_landslide_directive(self):
        text = (
            "class: center\n\n# Styling\n\n"
            "```css\n.btn:hover { color: red; }\n```\n\n"
            "???\nsecret presenter note\n"
        )
        assert detect_grammar(text) == "remark"

    def test_presenter_notes_heading_in_tilde_fence_ignored(self):
        text = "# Slide\n\n~~~markdown\n# Presenter Notes\n~~~\n\n???\nnotes\n"
        assert detect_grammar(text) == "remark"

    def test_strip_code_drops_fenced_and_indented_lines(self):
        text = "# Slide\n\n    .card:focus { outline: none; }\n\n```\n???\n```\nafter\n"
        assert _strip_code(text) == "# Slide\n\n\nafter\n"

    def test_directive_after_fence_still_counts(self):
        assert detect_grammar("```\nx\n```\n.fx: large\n???\n") == "landslide"
