import unittest
from datetime import datetime, timezone

from medium_jekyll.metadata import extract_metadata
from medium_jekyll.utils import slug_from_canonical_link, slugify_title

from helpers import COMMENT_FIXTURE, POST_FIXTURE, export_page, read_fixture


class TestExtractMetadata(unittest.TestCase):
    """Tests for metadata scraped from export pages."""

    def test_published_post(self):
        """A full export page yields every field."""
        metadata = extract_metadata(read_fixture(POST_FIXTURE))

        self.assertEqual(metadata.title, "Hello, World!")
        self.assertEqual(
            metadata.published_at, datetime(2020, 5, 1, 3, 0, tzinfo=timezone.utc)
        )
        self.assertTrue(metadata.is_published)
        self.assertEqual(
            metadata.canonical_link,
            "https://medium.com/@someone/hello-world-5e1c53a62ef2",
        )
        self.assertEqual(metadata.slug, "hello-world")
        self.assertFalse(metadata.looks_like_comment)

    def test_comment_without_body_heading(self):
        """A body without any <h3> is treated as a comment."""
        metadata = extract_metadata(read_fixture(COMMENT_FIXTURE))

        self.assertTrue(metadata.looks_like_comment)
        self.assertFalse(metadata.is_published)
        self.assertEqual(metadata.slug, "nice-reply")

    def test_slug_falls_back_to_title(self):
        """Without a canonical link the slug comes from the title."""
        metadata = extract_metadata(export_page("<h3>x</h3>", title="Hello, World!"))

        self.assertIsNone(metadata.canonical_link)
        self.assertEqual(metadata.slug, metadata.slug.lower())
        for char in " ,!":
            self.assertNotIn(char, metadata.slug)
        self.assertTrue(metadata.slug.startswith("hello-world"))

    def test_missing_everything_degrades(self):
        """Missing elements produce empty fields rather than errors."""
        metadata = extract_metadata("<html><body><p>nothing here</p></body></html>")

        self.assertIsNone(metadata.title)
        self.assertIsNone(metadata.published_at)
        self.assertFalse(metadata.is_published)
        self.assertIsNone(metadata.canonical_link)
        self.assertIsNone(metadata.slug)
        self.assertTrue(metadata.looks_like_comment)

    def test_unparseable_date_is_ignored(self):
        """A garbage datetime attribute leaves the post unpublished."""
        html = export_page(
            "<h3>x</h3>", extra='<time class="dt-published" datetime="not a date">?</time>'
        )
        metadata = extract_metadata(html)

        self.assertIsNone(metadata.published_at)
        self.assertFalse(metadata.is_published)

    def test_naive_date_is_utc(self):
        """Timestamps without an offset are read as UTC."""
        html = export_page(
            "<h3>x</h3>",
            extra='<time class="dt-published" datetime="2021-01-02T10:20:00">x</time>',
        )
        metadata = extract_metadata(html)

        self.assertEqual(
            metadata.published_at, datetime(2021, 1, 2, 10, 20, tzinfo=timezone.utc)
        )

    def test_malformed_markup_does_not_raise(self):
        """Unclosed tags are tolerated."""
        metadata = extract_metadata("<html><head><title>Broken<body><section data-field=")

        self.assertFalse(metadata.is_published)


class TestSlugs(unittest.TestCase):
    """Tests for slug helpers."""

    def test_hex_suffix_is_stripped(self):
        self.assertEqual(
            slug_from_canonical_link("https://medium.com/@a/some-title-5e1c53a62ef2"),
            "some-title",
        )

    def test_non_hex_suffix_is_kept(self):
        self.assertEqual(
            slug_from_canonical_link("https://medium.com/@a/plain-words"),
            "plain-words",
        )

    def test_percent_encoded_segment(self):
        self.assertEqual(
            slug_from_canonical_link(
                "https://medium.com/@a/%E6%97%A5%E6%9C%AC-5e1c53a62ef2"
            ),
            "日本",
        )

    def test_query_string_is_ignored(self):
        self.assertEqual(
            slug_from_canonical_link("https://medium.com/@a/post-abc123?source=rss"),
            "post",
        )

    def test_title_runs_collapse(self):
        self.assertEqual(slugify_title("Hello,   World"), "hello-world")
        self.assertEqual(slugify_title("Hello, World!"), "hello-world-")

    def test_non_ascii_title_survives(self):
        self.assertEqual(slugify_title("Café Notes"), "café-notes")
