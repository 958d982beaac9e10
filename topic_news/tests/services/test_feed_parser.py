"""Tests for RSS/Atom document parsing."""

from datetime import UTC, datetime

import pytest

from topic_news.services.feed_parser import (
    FeedKind,
    FeedParseError,
    detect_kind,
    parse_feed_document,
)
from topic_news.tests.feed_samples import ATOM_DOCUMENT, MALFORMED_XML, rss_document


def test_rss_items_are_normalized():
    body = rss_document(
        items=[
            ("First", "https://live.test/1", "Tue, 10 Jun 2025 09:30:00 GMT"),
            ("Second", "https://live.test/2", "garbage date"),
        ]
    )

    parsed = parse_feed_document(body)

    assert parsed.kind is FeedKind.RSS
    assert parsed.title == "Live News"
    assert [entry.title for entry in parsed.entries] == ["First", "Second"]
    assert parsed.entries[0].link == "https://live.test/1"
    assert parsed.entries[0].published_at == datetime(2025, 6, 10, 9, 30, tzinfo=UTC)
    assert parsed.entries[0].summary == "About First"
    assert parsed.entries[1].published_at is None


def test_single_rss_item_still_yields_a_list():
    parsed = parse_feed_document(rss_document(items=[("Only", "https://live.test/only", None)]))

    assert len(parsed.entries) == 1
    assert parsed.entries[0].published_at is None


def test_atom_prefers_alternate_link_and_reads_content():
    parsed = parse_feed_document(ATOM_DOCUMENT)

    assert parsed.kind is FeedKind.ATOM
    assert parsed.title == "Atom Feed"
    entry = parsed.entries[0]
    assert entry.link == "https://atom.test/entry-1"
    assert entry.published_at == datetime(2025, 6, 10, 9, 0, tzinfo=UTC)
    assert entry.summary == "Short summary"
    assert entry.content == "Full body"


def test_malformed_xml_raises_parse_error():
    with pytest.raises(FeedParseError):
        parse_feed_document(MALFORMED_XML)


def test_well_formed_non_feed_is_unrecognized():
    parsed = parse_feed_document(b"<?xml version='1.0'?><catalog><book>x</book></catalog>")

    assert parsed.kind is FeedKind.UNRECOGNIZED
    assert parsed.entries == []


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("rss20", FeedKind.RSS),
        ("rss091u", FeedKind.RSS),
        ("atom10", FeedKind.ATOM),
        ("", FeedKind.UNRECOGNIZED),
        (None, FeedKind.UNRECOGNIZED),
        ("cdf", FeedKind.UNRECOGNIZED),
    ],
)
def test_detect_kind(version, expected):
    assert detect_kind(version) is expected


DC_DATE_RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>DC Feed</title>
    <item>
      <title>Dated by dc:date</title>
      <link>https://dc.test/item</link>
      <dc:date>2025-06-10T12:00:00Z</dc:date>
    </item>
  </channel>
</rss>
"""

ATOM_UPDATED_ONLY = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Updated Only</title>
  <id>urn:uuid:feed-2</id>
  <updated>2025-06-10T10:00:00Z</updated>
  <entry>
    <title>E</title>
    <id>urn:uuid:entry-e</id>
    <link href="https://x.test/e"/>
    <updated>2025-06-10T10:00:00Z</updated>
    <summary>s</summary>
  </entry>
</feed>
"""


def test_rss_dc_date_used_when_pub_date_missing():
    entry = parse_feed_document(DC_DATE_RSS).entries[0]

    assert entry.link == "https://dc.test/item"
    assert entry.published_at == datetime(2025, 6, 10, 12, 0, tzinfo=UTC)


def test_atom_falls_back_to_updated_and_plain_link():
    parsed = parse_feed_document(ATOM_UPDATED_ONLY)

    assert parsed.kind is FeedKind.ATOM
    entry = parsed.entries[0]
    assert (entry.title, entry.link, entry.summary) == ("E", "https://x.test/e", "s")
    assert entry.published_at == datetime(2025, 6, 10, 10, 0, tzinfo=UTC)
