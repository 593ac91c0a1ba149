"""Split free-form provider output into Markdown and XML summaries.

Each artifact is produced by an ordered chain of extraction strategies; the
first strategy returning content wins. Strategies are plain functions so
each can be exercised on its own.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Callable, List, Optional, Tuple
from xml.sax.saxutils import escape

from .models import ExtractionResult

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
ROOT_ELEMENT = "summary"

ERROR_NARRATIVE = (
    "# Error Extracting Summary\n\n"
    "Unable to extract a proper markdown summary from the AI response."
)

Strategy = Callable[[str], Optional[str]]

_XML_ENTITIES = {"'": "&apos;", '"': "&quot;"}
_INVALID_XML_CHARS = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

_MARKDOWN_FENCE = re.compile(r"```markdown(.*?)```", re.DOTALL)
_MD_FENCE = re.compile(r"```md\b(.*?)```", re.DOTALL)
_HEADING_SPAN = re.compile(
    r"^#{1,6} [^\n]*(?:\n.*?)?(?=\n```xml|<\?xml|\Z)",
    re.DOTALL | re.MULTILINE,
)
_STRUCTURED_MARKER = re.compile(r"<\?xml|```xml")

_XML_FENCE = re.compile(r"```xml\s+(.*?)\s+```", re.DOTALL)
_DECLARED_DOCUMENT = re.compile(
    rf"<\?xml.*?(?:</{ROOT_ELEMENT}\s*>|<{ROOT_ELEMENT}\b[^>]*/>)",
    re.DOTALL,
)
_ROOT_SPAN = re.compile(
    rf"<{ROOT_ELEMENT}\b[^>]*(?<!/)>.*?</{ROOT_ELEMENT}\s*>|<{ROOT_ELEMENT}\b[^>]*/>",
    re.DOTALL,
)


def escape_xml(text: str) -> str:
    """Escape ``< > & ' "`` and drop characters XML 1.0 cannot carry."""
    return escape(_INVALID_XML_CHARS.sub("", text), _XML_ENTITIES)


def ensure_declaration(xml: str) -> str:
    xml = xml.strip()
    if xml.startswith("<?xml"):
        return xml
    return f"{XML_DECLARATION}\n{xml}"


def is_well_formed(xml: str) -> bool:
    try:
        ET.fromstring(xml.encode("utf-8"))
    except ET.ParseError:
        return False
    return True


def error_document(message: str, raw_text: Optional[str] = None, tag: str = "raw_response") -> str:
    """Build a minimal well-formed summary that carries an error."""
    lines = [
        XML_DECLARATION,
        f"<{ROOT_ELEMENT}>",
        f"  <error>{escape_xml(message)}</error>",
    ]
    if raw_text is not None:
        lines.append(f"  <{tag}>{escape_xml(raw_text)}</{tag}>")
    lines.append(f"</{ROOT_ELEMENT}>")
    return "\n".join(lines)


# Narrative strategies

def narrative_from_markdown_fence(text: str) -> Optional[str]:
    match = _MARKDOWN_FENCE.search(text)
    return match.group(1).strip() if match else None


def narrative_from_md_fence(text: str) -> Optional[str]:
    match = _MD_FENCE.search(text)
    return match.group(1).strip() if match else None


def narrative_from_heading(text: str) -> Optional[str]:
    """Take a ``# heading`` and its body, stopping at structured output."""
    match = _HEADING_SPAN.search(text)
    return match.group(0).strip() if match else None


def narrative_before_structured(text: str) -> Optional[str]:
    return _STRUCTURED_MARKER.split(text, maxsplit=1)[0].strip()


def narrative_full_text(text: str) -> Optional[str]:
    return text.strip()


NARRATIVE_STRATEGIES: List[Tuple[str, Strategy]] = [
    ("markdown-fence", narrative_from_markdown_fence),
    ("md-fence", narrative_from_md_fence),
    ("heading-span", narrative_from_heading),
    ("before-structured", narrative_before_structured),
    ("full-text", narrative_full_text),
]


# Structured strategies

def structured_from_xml_fence(text: str) -> Optional[str]:
    match = _XML_FENCE.search(text)
    return match.group(1) if match else None


def structured_from_declared_document(text: str) -> Optional[str]:
    match = _DECLARED_DOCUMENT.search(text)
    return match.group(0) if match else None


def structured_from_root_span(text: str) -> Optional[str]:
    match = _ROOT_SPAN.search(text)
    return match.group(0) if match else None


STRUCTURED_STRATEGIES: List[Tuple[str, Strategy]] = [
    ("xml-fence", structured_from_xml_fence),
    ("declared-document", structured_from_declared_document),
    ("root-span", structured_from_root_span),
]


def extract_narrative(text: str) -> str:
    """Extract the Markdown summary; always returns non-empty text."""
    text = text or ""
    try:
        for name, strategy in NARRATIVE_STRATEGIES:
            narrative = strategy(text)
            if narrative:
                logger.debug("Narrative extracted via %s", name)
                return narrative
    except Exception:
        logger.exception("Error extracting markdown summary")
    return ERROR_NARRATIVE


def extract_structured(text: str) -> str:
    """Extract the XML summary; always returns a well-formed document."""
    text = text or ""
    try:
        for name, strategy in STRUCTURED_STRATEGIES:
            candidate = strategy(text)
            if not candidate or not candidate.strip():
                continue
            xml = ensure_declaration(candidate)
            if is_well_formed(xml):
                logger.debug("Structured summary extracted via %s", name)
                return xml
            logger.debug("Discarding malformed XML candidate from %s", name)
        logger.warning("No structured XML summary found in response")
        return error_document(
            "No structured XML summary could be extracted from the AI response.",
            raw_text=text,
        )
    except Exception as exc:
        logger.exception("Error extracting XML summary")
        return error_document(
            "An error occurred while extracting the XML summary.",
            raw_text=str(exc),
            tag="details",
        )


def extract(text: str) -> ExtractionResult:
    """Produce both artifacts for one provider response."""
    return ExtractionResult(
        narrative=extract_narrative(text),
        structured=extract_structured(text),
    )
