"""Unit tests for the selector-cascade content extractor."""

import pytest

from quill.core.scraping.content_extractor import (
    ContentExtractor,
    ExtractionConfig,
    normalize_whitespace,
)


def words(count: int, word: str = "insight") -> str:
    return " ".join([word] * count)


def page(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


@pytest.fixture
def harvest_extractor() -> ContentExtractor:
    return ContentExtractor(ExtractionConfig.for_harvest("https://beyondchats.com"))


@pytest.fixture
def reference_extractor() -> ContentExtractor:
    return ContentExtractor(ExtractionConfig.for_reference())


class TestExtract:
    """Tests for full article extraction."""

    def test_extracts_all_fields(self, harvest_extractor: ContentExtractor) -> None:
        html = page(
            "<h1>  Why   Chatbots Matter </h1>"
            '<span class="author">Ada Lovelace</span>'
            f'<article><img src="/images/lead.png"><p>{words(60)}</p></article>'
        )

        result = harvest_extractor.extract(html)

        assert result is not None
        assert result.title == "Why Chatbots Matter"
        assert result.author == "Ada Lovelace"
        assert result.image_url == "https://beyondchats.com/images/lead.png"
        assert result.content.startswith("insight insight")

    def test_missing_title_returns_none(self, harvest_extractor: ContentExtractor) -> None:
        html = page(f"<article><p>{words(100)}</p></article>")

        assert harvest_extractor.extract(html) is None

    def test_short_content_returns_none(self, harvest_extractor: ContentExtractor) -> None:
        html = page("<h1>Title</h1><article><p>Too short to keep.</p></article>")

        assert harvest_extractor.extract(html) is None

    def test_author_defaults_to_unknown(self, harvest_extractor: ContentExtractor) -> None:
        html = page(f"<h1>Title</h1><article><p>{words(60)}</p></article>")

        result = harvest_extractor.extract(html)

        assert result is not None
        assert result.author == "Unknown"
        assert result.image_url is None

    def test_absolute_image_url_kept(self, harvest_extractor: ContentExtractor) -> None:
        html = page(
            "<h1>Title</h1>"
            f'<article><img src="https://cdn.example.com/a.jpg"><p>{words(60)}</p></article>'
        )

        result = harvest_extractor.extract(html)

        assert result is not None
        assert result.image_url == "https://cdn.example.com/a.jpg"

    def test_title_cascade_falls_through_empty_heading(
        self, harvest_extractor: ContentExtractor
    ) -> None:
        html = page(
            "<h1>   </h1>"
            '<div class="entry-title">Entry Title</div>'
            f"<article><p>{words(60)}</p></article>"
        )

        result = harvest_extractor.extract(html)

        assert result is not None
        assert result.title == "Entry Title"


class TestNoiseRemoval:
    """Tests that noise regions never leak into extracted text."""

    def test_scripts_and_chrome_removed(self, reference_extractor: ContentExtractor) -> None:
        html = page(
            "<header>SITE HEADER</header>"
            "<nav>MENU</nav>"
            "<script>var tracking = 1;</script>"
            '<div class="sidebar">SIDEBAR</div>'
            '<div class="comments">COMMENTS</div>'
            f"<article><p>{words(120)}</p></article>"
            "<footer>FOOTER</footer>"
        )

        text = reference_extractor.extract_text(html)

        for noise in ("SITE HEADER", "MENU", "tracking", "SIDEBAR", "COMMENTS", "FOOTER"):
            assert noise not in text

    def test_noise_inside_article_removed(self, reference_extractor: ContentExtractor) -> None:
        html = page(
            "<article>"
            f"<p>{words(120)}</p>"
            '<div class="advertisement">BUY NOW</div>'
            '<div class="related-posts">MORE POSTS</div>'
            "</article>"
        )

        text = reference_extractor.extract_text(html)

        assert "BUY NOW" not in text
        assert "MORE POSTS" not in text


class TestContentCascade:
    """Tests for the body content selector cascade."""

    def test_short_first_match_skipped_for_longer_selector(
        self, reference_extractor: ContentExtractor
    ) -> None:
        html = page(
            "<article>Short teaser</article>"
            f'<div class="post-content">{words(120, "detail")}</div>'
        )

        text = reference_extractor.extract_text(html)

        assert text.startswith("detail")
        assert "Short teaser" not in text

    def test_body_fallback_when_no_selector_sufficient(
        self, reference_extractor: ContentExtractor
    ) -> None:
        html = page(
            "<article>Short teaser</article>"
            f"<div class='unknown-layout'>{words(120, 'body')}</div>"
        )

        text = reference_extractor.extract_text(html)

        assert "Short teaser" in text
        assert "body body" in text

    def test_whitespace_collapsed(self, reference_extractor: ContentExtractor) -> None:
        html = page("<main>  first\n\n\tsecond   third  </main>")

        assert reference_extractor.extract_text(html) == "first second third"

    def test_reference_content_truncated_to_cap(
        self, reference_extractor: ContentExtractor
    ) -> None:
        html = page(f"<article>{words(2000)}</article>")

        text = reference_extractor.extract_text(html)

        assert len(text) == 4000

    def test_harvest_content_not_truncated(self, harvest_extractor: ContentExtractor) -> None:
        html = page(f"<h1>Title</h1><article>{words(2000)}</article>")

        result = harvest_extractor.extract(html)

        assert result is not None
        assert len(result.content) > 4000

    @pytest.mark.parametrize(
        "html",
        [
            "",
            "<p>tiny</p>",
            page(f"<article>{words(5000)}</article>"),
            page(f"<h1>T</h1><div>{words(900)}</div><main>{words(900)}</main>"),
        ],
    )
    def test_never_exceeds_cap(self, reference_extractor: ContentExtractor, html: str) -> None:
        assert len(reference_extractor.extract_text(html)) <= 4000

    def test_empty_document_yields_empty_text(
        self, reference_extractor: ContentExtractor
    ) -> None:
        assert reference_extractor.extract_text("<html><body></body></html>") == ""


def test_normalize_whitespace() -> None:
    assert normalize_whitespace("  a \n\n b\t c  ") == "a b c"
