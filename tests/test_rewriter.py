"""Tests for the document-level rewrite rules."""

import io
import unittest

from fixuphtml import FixupHTML, FixupOpts, fixup, run

PANDOC_DOCUMENT = """<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" lang="" xml:lang="">
<head>
  <meta charset="utf-8" />
  <meta name="generator" content="pandoc" />
  <title>Guide</title>
</head>
<body>
<header id="title-block-header">
<h1 class="title">Guide</h1>
</header>
<nav id="TOC">
<ul>
<li><a href="#intro">Intro</a></li>
</ul>
</nav>
<h2 id="intro">Intro</h2>
<p>Hello.</p>
</body>
</html>
"""

FIXED_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="generator" content="pandoc,fixuphtml" />
  <title>Guide</title>
</head>
<body>
<header id="title-block-header">
<h1 class="title">Guide</h1>
</header>
<nav id="TOC" title="Table Of Contents">
<ul>
<li><a href="#intro">Intro</a></li>
</ul>
</nav>
<main><h2 id="intro">Intro</h2>
<p>Hello.</p>
</main></body>
</html>
"""


class TestDocument(unittest.TestCase):
    def test_pandoc_document(self):
        assert fixup(PANDOC_DOCUMENT) == FIXED_DOCUMENT

    def test_second_run_is_stable(self):
        assert fixup(FIXED_DOCUMENT) == FIXED_DOCUMENT

    def test_pass_through(self):
        html = (
            "<div class='a' data-x=1>x &amp; y</div>\r\n"
            "<!-- note -->\n"
            "<p>\ttext  with   spaces</p>\n"
            "<script>if (a < b) { run(); }</script>\n"
            "trailing text without newline"
        )
        doc = FixupHTML(html)
        assert doc.html == html
        assert doc.errors == []

    def test_pass_through_with_bad_markup(self):
        html = "<p>1 < 2</p>\n"
        doc = FixupHTML(html)
        assert doc.html == html
        assert len(doc.errors) == 1

    def test_run_streams(self):
        out = io.StringIO()
        errors = run(io.StringIO("<html>\n<body>x</body>\n</html>\n"), out)
        assert errors == []
        assert out.getvalue() == '<html lang="en">\n<body><main>x</main></body>\n</html>\n'


class TestHtmlElement(unittest.TestCase):
    def test_attributes_replaced(self):
        assert fixup('<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="de">') == '<html lang="en">'

    def test_idempotent(self):
        once = fixup("<HTML>")
        assert once == '<html lang="en">'
        assert fixup(once) == once

    def test_configurable_language(self):
        assert fixup("<html>", opts=FixupOpts(lang="fr")) == '<html lang="fr">'


class TestGeneratorMeta(unittest.TestCase):
    def test_suffix_appended(self):
        html = '<meta name="generator" content="pandoc">'
        assert fixup(html) == '<meta name="generator" content="pandoc,fixuphtml">'

    def test_suffix_not_doubled(self):
        html = '<meta name="generator" content="pandoc">'
        assert fixup(fixup(html)) == '<meta name="generator" content="pandoc,fixuphtml">'

    def test_other_attributes_untouched(self):
        html = "<meta content='pandoc 3.1' NAME=generator data-x = \"y\" >"
        assert fixup(html) == "<meta content='pandoc 3.1,fixuphtml' NAME=generator data-x = \"y\" >"

    def test_other_meta_untouched(self):
        html = '<meta name="viewport" content="width=device-width" />'
        assert fixup(html) == html

    def test_generator_without_content(self):
        html = '<meta name="generator">'
        assert fixup(html) == html


class TestTocNav(unittest.TestCase):
    def test_title_added(self):
        assert fixup('<nav id="TOC">') == '<nav id="TOC" title="Table Of Contents">'

    def test_self_closing(self):
        assert fixup('<nav id="TOC"/>') == '<nav id="TOC" title="Table Of Contents"/>'

    def test_existing_title_kept(self):
        html = '<nav id="TOC" title="Contents">'
        assert fixup(html) == html

    def test_other_nav_untouched(self):
        html = '<nav id="other">'
        assert fixup(html) == html


class TestMainInsertion(unittest.TestCase):
    def test_text_gets_main(self):
        assert fixup("<body>\nHello\n</body>") == "<body>\n<main>Hello\n</main></body>"

    def test_element_gets_main(self):
        assert fixup("<body><p>a</p></body>") == "<body><main><p>a</p></main></body>"

    def test_empty_body(self):
        html = "<body>\n  \n</body>\n"
        assert fixup(html) == html

    def test_non_breaking_space_is_content(self):
        assert fixup("<body>\n\xa0\n</body>") == "<body>\n<main>\xa0\n</main></body>"

    def test_only_sections(self):
        html = "<body>\n<header>h</header>\n<nav>n</nav>\n<footer>f</footer>\n</body>\n"
        assert fixup(html) == html

    def test_explicit_main(self):
        html = "<body>\n<main>\n<p>a</p>\n</main>\n<p>b</p>\n</body>\n"
        assert fixup(html) == html

    def test_section_closes_main(self):
        html = "<body><p>a</p><footer>f</footer></body>"
        assert fixup(html) == "<body><main><p>a</p></main><footer>f</footer></body>"

    def test_content_after_section(self):
        html = "<body><header>h</header><p>a</p><aside>x</aside><p>b</p></body>"
        assert fixup(html) == "<body><header>h</header><main><p>a</p></main><aside>x</aside><p>b</p></body>"

    def test_nested_sections(self):
        html = "<body><aside><nav>n</nav>text</aside><p>z</p></body>"
        assert fixup(html) == "<body><aside><nav>n</nav>text</aside><main><p>z</p></main></body>"

    def test_no_main_before_body(self):
        html = "<head><title>t</title></head>\n"
        assert fixup(html) == html

    def test_no_main_after_body(self):
        html = "<body></body>\n<p>late</p>\n"
        assert fixup(html) == html

    def test_table_in_body(self):
        html = "<body>\n<table><tr><td>a</td></tr></table>\n</body>"
        assert fixup(html) == (
            "<body>\n<main><table><tr>"
            '<th style="font-weight: normal; text-align: left" scope="row">a</th>'
            "</tr></table>\n</main></body>"
        )

    def test_exactly_one_main(self):
        html = "<body><p>a</p><p>b</p><header>h</header><p>c</p></body>"
        out = fixup(html)
        assert out.count("<main>") == 1
        assert out.count("</main>") == 1


if __name__ == "__main__":
    unittest.main()
