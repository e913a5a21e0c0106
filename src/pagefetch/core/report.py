"""Markdown rendering of batch outcomes."""

from ..models.results import BatchOutcome, FetchSuccess

REPORT_HEADING = "# Batch Fetch Results\n\n"
SECTION_SEPARATOR = "---\n\n"


def render_batch_report(batch: BatchOutcome) -> str:
    """
    Render a batch as one Markdown document.

    Each URL gets a second-level heading followed by its document, or by
    an ``**Error:**`` line when it failed, and a horizontal rule.

    Args:
        batch: Outcomes in input order

    Returns:
        The report text
    """
    parts = [REPORT_HEADING]
    for item in batch:
        parts.append(f"## {item.url}\n\n")
        if isinstance(item.outcome, FetchSuccess):
            parts.append(item.outcome.text.rstrip("\n") + "\n\n")
        else:
            parts.append(f"**Error:** {item.outcome.message}\n\n")
        parts.append(SECTION_SEPARATOR)
    return "".join(parts)
