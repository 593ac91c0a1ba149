"""Fallback summary artifacts written when generation fails."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

from .extractor import ROOT_ELEMENT, XML_DECLARATION, escape_xml
from .models import ExtractionResult

NEXT_STEPS = [
    "Your API keys are correct",
    "The API service is available",
    "Your network connection is stable",
    "The input file is a valid packed repository",
]


def _format_timestamp(timestamp: Union[datetime, str, None]) -> str:
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    if isinstance(timestamp, datetime):
        return timestamp.isoformat()
    return str(timestamp)


def generate_fallback(
    failure_reason: str,
    timestamp: Union[datetime, str, None] = None,
) -> ExtractionResult:
    """Build the Markdown/XML pair describing a failed generation.

    The shape is identical for transport, authorization, and unexpected
    failures; only the embedded message differs.

    Args:
        failure_reason: Human-readable failure message
        timestamp: When the failure happened (defaults to now, UTC)

    Returns:
        ExtractionResult with both artifacts populated
    """
    message = failure_reason or "Unknown error"
    stamp = _format_timestamp(timestamp)

    steps = "\n".join(f"{i}. {step}" for i, step in enumerate(NEXT_STEPS, start=1))
    narrative = (
        "# API Request Error Summary\n\n"
        "## Error Details\n\n"
        f"- **Timestamp**: {stamp}\n"
        f"- **Error**: {message}\n\n"
        "## Next Steps\n\n"
        "Please try again later or check:\n\n"
        f"{steps}\n"
    )

    structured = "\n".join([
        XML_DECLARATION,
        f"<{ROOT_ELEMENT}>",
        "  <error>",
        f"    <timestamp>{escape_xml(stamp)}</timestamp>",
        f"    <message>{escape_xml(message)}</message>",
        "  </error>",
        f"</{ROOT_ELEMENT}>",
    ])
    return ExtractionResult(narrative=narrative, structured=structured)


def describe_exception(exc: Optional[BaseException]) -> str:
    """Render an exception as a single-line failure reason."""
    if exc is None:
        return "Unknown error"
    text = str(exc).strip()
    return text or type(exc).__name__
