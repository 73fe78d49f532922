import unittest

from bs4 import BeautifulSoup

from medium_jekyll.cleanup import cleanup_html

from helpers import CDN_IMAGE, POST_FIXTURE, export_page, read_fixture


def _clean(html, **kwargs):
    return BeautifulSoup(cleanup_html(html, **kwargs), "html.parser")


class TestCleanupFixture(unittest.TestCase):
    """Tests running the whole cleanup over an export page."""

    def setUp(self):
        self.soup = _clean(read_fixture(POST_FIXTURE))

    def test_only_body_is_returned(self):
        self.assertIsNone(self.soup.find("footer"))
        self.assertIsNone(self.soup.find("header"))
        self.assertNotIn("A first post", self.soup.get_text())

    def test_title_heading_removed(self):
        headings = [h.get_text() for h in self.soup.find_all(["h1", "h2", "h3", "h4"])]
        self.assertNotIn("Hello, World!", headings)

    def test_only_first_divider_removed(self):
        self.assertEqual(len(self.soup.find_all("hr")), 1)

    def test_headings_shift_up_once(self):
        self.assertEqual(self.soup.find("h2", string="Setup").name, "h2")
        self.assertIsNotNone(self.soup.find("h3", string="Requirements"))
        self.assertIsNotNone(self.soup.find("h2", string="Second part"))
        self.assertIsNone(self.soup.find("h4"))

    def test_code_blocks_merged_and_wrapped(self):
        pres = self.soup.find_all("pre")
        self.assertEqual(len(pres), 1)
        code = pres[0].find("code")
        self.assertIsNotNone(code)
        self.assertEqual(
            code.get_text(), 'import os\nprint(os.getcwd())\n\nprint("done")'
        )

    def test_quotes_merged(self):
        quotes = self.soup.find_all("blockquote")
        self.assertEqual(len(quotes), 1)
        self.assertIn("First line of quote", quotes[0].get_text())
        self.assertIn("Second line of quote", quotes[0].get_text())
        self.assertEqual(len(quotes[0].find_all("br")), 2)


class TestCleanupRules(unittest.TestCase):
    """Tests for individual rewrite rules."""

    def test_adjacent_code_blocks(self):
        soup = _clean(export_page("<pre><code>foo</code></pre><pre><code>bar</code></pre>"))

        self.assertEqual(len(soup.find_all("pre")), 1)
        self.assertEqual(soup.pre.code.get_text(), "foo\n\nbar")

    def test_chain_of_code_blocks(self):
        soup = _clean(export_page("<pre>a</pre>\n<pre>b</pre>\n<pre>c</pre>"))

        self.assertEqual(len(soup.find_all("pre")), 1)
        self.assertEqual(soup.pre.code.get_text(), "a\n\nb\n\nc")

    def test_separated_code_blocks_stay_apart(self):
        soup = _clean(export_page("<pre>a</pre><p>between</p><pre>b</pre>"))

        self.assertEqual([pre.get_text() for pre in soup.find_all("pre")], ["a", "b"])

    def test_line_breaks_inside_code(self):
        soup = _clean(export_page("<pre><code>a<br>b<br/>c</code></pre>"))

        self.assertIsNone(soup.find("br"))
        self.assertEqual(soup.pre.code.get_text(), "a\nb\nc")

    def test_rich_code_block_keeps_markup(self):
        soup = _clean(export_page("<pre>x = <strong>1</strong></pre>"))

        self.assertEqual(soup.pre.code.strong.get_text(), "1")

    def test_quotes_keep_inner_markup(self):
        soup = _clean(
            export_page("<blockquote><em>one</em></blockquote><blockquote>two</blockquote>")
        )

        quote = soup.blockquote
        self.assertEqual(quote.em.get_text(), "one")
        self.assertEqual(str(quote), "<blockquote><em>one</em><br/><br/>two</blockquote>")

    def test_already_escalated_headings_unchanged(self):
        soup = _clean(export_page("<h3>Title</h3><h2>Kept</h2><p>x</p>"))

        self.assertEqual([h.name for h in soup.find_all(["h1", "h2", "h3"])], ["h2"])

    def test_deep_headings_shift(self):
        soup = _clean(export_page("<h3>Title</h3><h5>five</h5><h6>six</h6>"))

        self.assertEqual(soup.find("h4").get_text(), "five")
        self.assertEqual(soup.find("h5").get_text(), "six")

    def test_title_removed_from_first_section_only(self):
        body = (
            '<section class="section"><p>intro</p></section>'
            '<section class="section"><h3>Keep me</h3></section>'
        )
        soup = _clean(export_page(body))

        self.assertEqual(soup.find("h2").get_text(), "Keep me")

    def test_local_assets_mapping(self):
        html = export_page(f'<h3>t</h3><img src="{CDN_IMAGE}"><img src="/already/local.png">')
        soup = _clean(html, local_assets={CDN_IMAGE: "/images/1*abc.png"})

        self.assertEqual(
            [img["src"] for img in soup.find_all("img")],
            ["/images/1*abc.png", "/already/local.png"],
        )

    def test_missing_body(self):
        self.assertEqual(cleanup_html("<html><body><p>x</p></body></html>"), "")
