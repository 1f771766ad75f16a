"""Unit tests for link harvesting."""

import pytest

from quill.core.scraping.link_harvester import HarvestConfig, LinkHarvester


@pytest.fixture
def harvester() -> LinkHarvester:
    return LinkHarvester(HarvestConfig(site_origin="https://beyondchats.com"))


def test_relative_links_resolved_against_origin(harvester: LinkHarvester) -> None:
    html = """
    <article><a href="/blogs/first-post/">First</a></article>
    <article><a href="blogs/second-post/">Second</a></article>
    """

    assert harvester.harvest(html) == [
        "https://beyondchats.com/blogs/first-post/",
        "https://beyondchats.com/blogs/second-post/",
    ]


def test_absolute_links_kept(harvester: LinkHarvester) -> None:
    html = '<h2><a href="https://beyondchats.com/blogs/absolute/">Absolute</a></h2>'

    assert harvester.harvest(html) == ["https://beyondchats.com/blogs/absolute/"]


def test_fragment_and_off_path_links_rejected(harvester: LinkHarvester) -> None:
    html = """
    <article>
      <a href="/blogs/real-post/">Real</a>
      <a href="/blogs/real-post/#comments">Comments</a>
      <a href="/pricing/">Pricing</a>
      <a>No href</a>
    </article>
    """

    assert harvester.harvest(html) == ["https://beyondchats.com/blogs/real-post/"]


def test_duplicates_across_selectors_collapsed(harvester: LinkHarvester) -> None:
    html = """
    <article><h2><a href="/blogs/same/">Same</a></h2></article>
    <div class="post"><a href="/blogs/same/">Same again</a></div>
    """

    assert harvester.harvest(html) == ["https://beyondchats.com/blogs/same/"]


def test_result_capped_at_five(harvester: LinkHarvester) -> None:
    anchors = "".join(
        f'<article><a href="/blogs/post-{i}/">Post {i}</a></article>' for i in range(8)
    )

    links = harvester.harvest(anchors)

    assert len(links) == 5
    assert links[0] == "https://beyondchats.com/blogs/post-0/"
    assert links[-1] == "https://beyondchats.com/blogs/post-4/"


def test_selector_order_preserved() -> None:
    harvester = LinkHarvester(
        HarvestConfig(site_origin="https://beyondchats.com", selectors=["h3 a", "h2 a"])
    )
    html = """
    <h2><a href="/blogs/from-h2/">h2</a></h2>
    <h3><a href="/blogs/from-h3/">h3</a></h3>
    """

    assert harvester.harvest(html) == [
        "https://beyondchats.com/blogs/from-h3/",
        "https://beyondchats.com/blogs/from-h2/",
    ]


def test_empty_page_yields_no_links(harvester: LinkHarvester) -> None:
    assert harvester.harvest("<html><body><p>Nothing here</p></body></html>") == []
