"""
Tests for markdown ⇄ editor HTML transcoding.

Feature: docedit
"""

import string

import pytest
from bs4 import BeautifulSoup
from hypothesis import given, settings
from hypothesis import strategies as st

from docedit.exceptions import DocumentFormatError
from docedit.transcoder import decode, decode_bytes, encode, split_front_matter

_STRUCTURAL_TAGS = [
    "h1", "h2", "h3", "h4", "h5", "h6", "li", "pre", "blockquote",
    "a", "strong", "em", "code", "del", "th", "td",
]

GUIDE = """---
title: Guide
sidebar_position: 2
tags:
  - intro
  - docs
---

# Guide

Some *emphasis*, **bold** and `code` with a [link](https://example.com "Example").

## Steps

1. First step
2. Second step
    - nested a
    - nested b
3. Third

- bullet one
- bullet two

> A quote

```python
print("hi")
```

| Name | Value |
| --- | --- |
| a | 1 |
"""


def structure(html: str) -> list[tuple[str, str]]:
    """Tag names and whitespace-normalised text of the structural elements."""
    soup = BeautifulSoup(html, "html.parser")
    return [
        (tag.name, " ".join(tag.get_text().split()))
        for tag in soup.find_all(_STRUCTURAL_TAGS)
    ]


def round_trip(text: str) -> str:
    front_matter, html = decode(text)
    return encode(html, front_matter)


# Strategies for generating documents
key_strategy = st.text(alphabet=string.ascii_letters, min_size=1, max_size=12)
value_strategy = st.one_of(
    st.integers(min_value=-(10**6), max_value=10**6),
    st.booleans(),
    st.text(alphabet=string.ascii_letters + string.digits + " ", max_size=30),
)
front_matter_strategy = st.dictionaries(key_strategy, value_strategy, min_size=1, max_size=6)
word_strategy = st.text(alphabet=string.ascii_letters, min_size=1, max_size=10)
paragraph_strategy = st.lists(word_strategy, min_size=1, max_size=8).map(" ".join)


class TestDecode:
    def test_front_matter_and_heading(self) -> None:
        front_matter, html = decode("---\ntitle: Intro\n---\n\n# Hello\n")

        assert front_matter == {"title": "Intro"}
        assert structure(html) == [("h1", "Hello")]

    def test_document_without_front_matter(self) -> None:
        front_matter, html = decode("# Title\n\nBody text.\n")

        assert front_matter is None
        assert structure(html) == [("h1", "Title")]
        assert "Body text." in html

    def test_empty_front_matter_block(self) -> None:
        front_matter, html = decode("---\n---\n\nBody\n")

        assert front_matter == {}
        assert "---" not in html

    def test_horizontal_rule_is_not_front_matter(self) -> None:
        front_matter, html = decode("---\n\nJust a rule above.\n")

        assert front_matter is None
        assert "<hr" in html

    def test_preserves_standard_constructs(self) -> None:
        _, html = decode(GUIDE)
        tags = {name for name, _ in structure(html)}

        assert {"h1", "h2", "li", "pre", "blockquote", "a", "strong", "em", "code", "td"} <= tags
        soup = BeautifulSoup(html, "html.parser")
        assert soup.find("code", class_="language-python") is not None
        assert soup.find("a")["href"] == "https://example.com"

    def test_malformed_yaml_raises(self) -> None:
        with pytest.raises(DocumentFormatError) as exc_info:
            decode("---\ntitle: [unclosed\n---\n\nBody\n")

        assert exc_info.value.code == "DOCUMENT_FORMAT_ERROR"

    def test_front_matter_must_be_mapping(self) -> None:
        with pytest.raises(DocumentFormatError):
            decode("---\n- a\n- b\n---\n\nBody\n")

    def test_byte_order_mark_is_ignored(self) -> None:
        front_matter, _ = split_front_matter("\ufeff---\ntitle: Intro\n---\nBody\n")

        assert front_matter == {"title": "Intro"}


class TestDecodeBytes:
    def test_utf8(self) -> None:
        assert decode_bytes("Grüße".encode()) == "Grüße"

    def test_strips_bom(self) -> None:
        assert decode_bytes(b"\xef\xbb\xbf# Hi\n") == "# Hi\n"

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(DocumentFormatError):
            decode_bytes(b"\xff\xfe\xfa")


class TestEncode:
    def test_reencoding_keeps_front_matter_header(self) -> None:
        front_matter, _ = decode("---\ntitle: Intro\n---\n\n# Hello\n")

        text = encode("<h1>Hello again</h1><p>New paragraph.</p>", front_matter)

        assert text.startswith("---\ntitle: Intro\n---\n")
        assert text == "---\ntitle: Intro\n---\n\n# Hello again\n\nNew paragraph.\n"

    def test_no_front_matter_is_added(self) -> None:
        assert encode("<p>Body</p>") == "Body\n"
        assert encode("<p>Body</p>", None) == "Body\n"

    def test_empty_front_matter_is_dropped(self) -> None:
        assert encode("<p>Body</p>", {}) == "Body\n"

    def test_empty_document(self) -> None:
        assert encode("") == ""
        assert encode("", {"title": "Only metadata"}) == "---\ntitle: Only metadata\n---\n"

    def test_editor_list_markup(self) -> None:
        html = (
            "<ul><li><p>One</p></li><li><p>Two</p>"
            "<ol start=\"3\"><li><p>Three</p></li></ol></li></ul>"
        )

        assert encode(html) == "- One\n- Two\n    3. Three\n"

    def test_code_block_with_language(self) -> None:
        html = '<pre><code class="language-js">const a = 1\n</code></pre>'

        assert encode(html) == "```js\nconst a = 1\n```\n"

    def test_code_block_containing_fence(self) -> None:
        html = "<pre><code>```\ninner\n```\n</code></pre>"

        text = encode(html)

        assert text.startswith("````\n")
        assert structure(decode(text)[1]) == [("pre", "``` inner ```"), ("code", "``` inner ```")]

    def test_inline_code_containing_backtick(self) -> None:
        assert encode("<p><code>a`b</code></p>") == "``a`b``\n"

    def test_link_and_image(self) -> None:
        html = '<p><a href="https://example.com/a b" title="T">x</a> <img src="/img.png" alt="pic"></p>'

        assert encode(html) == '[x](<https://example.com/a b> "T") ![pic](/img.png)\n'

    def test_hard_break(self) -> None:
        _, html = decode(encode("<p>Line one<br>Line two</p>"))

        assert "<br" in html

    def test_hard_break_round_trip(self) -> None:
        source = "Line one  \nLine two\n"

        assert round_trip(source) == source
        assert round_trip(round_trip(source)) == source

    def test_hard_break_followed_by_source_newline(self) -> None:
        assert encode("<p>Line one<br>\n  Line two</p>") == "Line one  \nLine two\n"

    def test_hard_break_inside_emphasis(self) -> None:
        assert encode("<p><em>one<br>\ntwo</em></p>") == "*one  \ntwo*\n"

    def test_hard_break_in_list_item_text(self) -> None:
        assert encode("<ul><li>one<br>\ntwo</li></ul>") == "- one  \n    two\n"

    def test_strike_survives(self) -> None:
        _, html = decode(encode("<p><s>gone</s> here</p>"))

        assert ("del", "gone") in structure(html)

    def test_horizontal_rule(self) -> None:
        assert encode("<p>a</p><hr><p>b</p>") == "a\n\n* * *\n\nb\n"

    @pytest.mark.parametrize(
        "text",
        [
            "# not a heading",
            "1. not a list",
            "- not a bullet",
            "> not a quote",
            "2 * 3 = 6 and snake_case",
            "[not](a link)",
            "a <b> tag",
            "ends with C#",
        ],
    )
    def test_text_is_escaped(self, text: str) -> None:
        html = f"<p>{text.replace('<', '&lt;').replace('>', '&gt;')}</p>"

        _, decoded = decode(encode(html))
        soup = BeautifulSoup(decoded, "html.parser")

        assert soup.find("p") is not None
        assert soup.get_text().strip() == text

    def test_heading_ending_in_hash(self) -> None:
        _, html = decode(encode("<h2>Learn C#</h2>"))

        assert structure(html) == [("h2", "Learn C#")]


class TestRoundTrip:
    def test_structure_is_preserved(self) -> None:
        front_matter, html = decode(GUIDE)

        again_front_matter, again_html = decode(encode(html, front_matter))

        assert again_front_matter == front_matter
        assert structure(again_html) == structure(html)

    def test_round_trip_is_stable(self) -> None:
        once = round_trip(GUIDE)

        assert round_trip(once) == once

    @given(front_matter=front_matter_strategy)
    @settings(max_examples=100)
    def test_front_matter_is_preserved_exactly(self, front_matter: dict) -> None:
        """
        Every front matter key and value survives decode then encode.
        """
        _, html = decode("# Heading\n\nSome text.\n")

        text = encode(html, front_matter)
        decoded_front_matter, decoded_html = decode(text)

        assert decoded_front_matter == front_matter
        assert list(decoded_front_matter) == list(front_matter)
        assert structure(decoded_html) == [("h1", "Heading")]

    @given(paragraphs=st.lists(paragraph_strategy, min_size=1, max_size=5))
    @settings(max_examples=100)
    def test_documents_without_front_matter_never_gain_one(self, paragraphs: list[str]) -> None:
        source = "\n\n".join(paragraphs) + "\n"

        text = round_trip(source)

        assert not text.startswith("---")
        assert decode(text)[0] is None
        assert text == source
