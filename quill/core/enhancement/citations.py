"""Citation block appended to every enhanced article."""

from quill.models import Reference

ATTRIBUTION = "*Enhanced by AI for improved SEO and readability.*"


def build_citation_block(references: list[Reference]) -> str:
    """
    Render the references section as markdown.

    Args:
        references: Scraped references in the order they were used

    Returns:
        Markdown section listing each reference as a numbered, linked source
    """
    sources = "\n".join(
        f"{i}. [Source {i}]({ref.url})" for i, ref in enumerate(references, start=1)
    )
    return (
        "\n\n---\n\n"
        "## References\n\n"
        "This article was enhanced based on insights from:\n\n"
        f"{sources}\n\n"
        f"{ATTRIBUTION}\n"
    )


def append_citations(text: str, references: list[Reference]) -> str:
    """Return ``text`` with the citation block appended."""
    return text + build_citation_block(references)
