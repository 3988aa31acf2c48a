from __future__ import annotations

import unittest

from fixuphtml.serialize import (
    _escape_attr_value,
    merge_style,
    parse_style,
    serialize_attribute,
    serialize_end_tag,
    serialize_start_tag,
)


class TestSerializeTags(unittest.TestCase):
    def test_start_tag(self) -> None:
        assert serialize_start_tag("th", {"class": "a", "hidden": None}) == '<th class="a" hidden>'

    def test_start_tag_without_attributes(self) -> None:
        assert serialize_start_tag("main", None) == "<main>"

    def test_end_tag(self) -> None:
        assert serialize_end_tag("th") == "</th>"

    def test_quote_choice(self) -> None:
        assert serialize_attribute("title", 'say "hi"') == " title='say \"hi\"'"
        assert serialize_attribute("title", "it's \"x\"") == ' title="it\'s &quot;x&quot;"'

    def test_escaping(self) -> None:
        assert _escape_attr_value("a < b > c", '"') == "a &lt; b &gt; c"
        assert _escape_attr_value("a&nbsp;b & c", '"') == "a&amp;nbsp;b &amp; c"

    def test_encoded_values_are_kept(self) -> None:
        assert serialize_attribute("title", "a&amp;nbsp;b &lt;", encoded=True) == ' title="a&amp;nbsp;b &lt;"'
        assert serialize_start_tag("th", {"title": "x &quot;y&quot;"}, encoded=True) == '<th title="x &quot;y&quot;">'

    def test_encoded_value_still_quoted_safely(self) -> None:
        assert serialize_attribute("title", 'say "hi"', encoded=True) == " title='say \"hi\"'"


class TestStyles(unittest.TestCase):
    def test_parse_style(self) -> None:
        assert parse_style(" Color : red;;width:1px; ") == [("color", "Color : red"), ("width", "width:1px")]
        assert parse_style(None) == []

    def test_merge_adds_defaults(self) -> None:
        merged = merge_style("color:red", ["font-weight: normal"], ["text-align: left"])
        assert merged == "font-weight: normal; text-align: left; color:red"

    def test_merge_respects_existing_property(self) -> None:
        merged = merge_style("TEXT-ALIGN:right", ["font-weight: normal"], ["text-align: left"])
        assert merged == "font-weight: normal; TEXT-ALIGN:right"

    def test_merge_dedupes_keeping_first(self) -> None:
        merged = merge_style("font-weight: bold; color: red; color: blue", ["font-weight: normal"], [])
        assert merged == "font-weight: normal; color: red"

    def test_merge_keeps_trailing_semicolon(self) -> None:
        merged = merge_style("text-align: left;", ["font-weight: normal"], ["text-align: left"])
        assert merged == "font-weight: normal; text-align: left;"

    def test_merge_into_nothing(self) -> None:
        assert merge_style("", ["font-weight: normal"], ["text-align: left"]) == (
            "font-weight: normal; text-align: left"
        )


if __name__ == "__main__":
    unittest.main()
