"""AI-assisted classification of paths that no area owns yet."""

from __future__ import annotations

import json
import logging
import re
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .config import MAX_SAMPLE_FILES, MAX_SAMPLE_LINES, SAMPLE_EXTENSIONS
from .models import AreaDefinition, PathClassificationSuggestion
from .prompts import CLASSIFICATION_PROMPT, SAMPLES_HEADER

logger = logging.getLogger(__name__)

SampleProvider = Callable[[str], Optional[str]]

_JSON_FENCE = re.compile(r"```json[ \t]*\n(.*?)\n[ \t]*```", re.DOTALL)
_PLAIN_FENCE = re.compile(r"```[ \t]*\n(.*?)\n[ \t]*```", re.DOTALL)


def collect_samples(
    paths: Sequence[str],
    sample_provider: SampleProvider,
    max_files: int = MAX_SAMPLE_FILES,
    max_lines: int = MAX_SAMPLE_LINES,
) -> Dict[str, str]:
    """Gather truncated content for up to ``max_files`` text-like paths."""
    samples: Dict[str, str] = {}
    for path in paths:
        if len(samples) >= max_files:
            break
        if PurePosixPath(path).suffix.lower() not in SAMPLE_EXTENSIONS:
            continue
        content = sample_provider(path)
        if content is None:
            continue
        samples[path] = "\n".join(content.split("\n")[:max_lines])
    return samples


def build_classification_prompt(
    uncategorized_paths: Sequence[str],
    areas: Mapping[str, AreaDefinition],
    samples: Mapping[str, str],
) -> str:
    """Render the single classification request for a batch of paths."""
    area_definitions = [
        {
            "name": name,
            "description": area.description,
            "included_paths": area.included_patterns,
            "excluded_paths": area.excluded_patterns,
        }
        for name, area in areas.items()
    ]
    sample_text = ""
    if samples:
        sample_text = SAMPLES_HEADER + "\n".join(
            f"--- {path} ---\n{content}\n" for path, content in samples.items()
        ) + "\n"
    return CLASSIFICATION_PROMPT.format(
        areas_json=json.dumps(area_definitions, indent=2),
        paths="\n".join(uncategorized_paths),
        samples=sample_text,
    )


def _reply_candidates(raw_text: str) -> List[str]:
    candidates = []
    for pattern in (_JSON_FENCE, _PLAIN_FENCE):
        match = pattern.search(raw_text)
        if match:
            candidates.append(match.group(1))
    candidates.append(raw_text)
    return candidates


def _to_suggestion(record: Any) -> Optional[PathClassificationSuggestion]:
    if not isinstance(record, dict):
        return None
    path = record.get("path")
    area = record.get("category", record.get("area"))
    confidence = record.get("confidence")
    if not isinstance(path, str) or not isinstance(area, str):
        return None
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        return None
    reasoning = record.get("reasoning")
    return PathClassificationSuggestion(
        path=path,
        area=area,
        confidence=min(1.0, max(0.0, float(confidence))),
        reasoning=reasoning if isinstance(reasoning, str) else "",
    )


def parse_classification_reply(raw_text: str) -> List[PathClassificationSuggestion]:
    """Parse the provider's JSON array into suggestions.

    Looks for a ```json fence, then an untagged fence, then treats the whole
    reply as JSON. Anything unparseable yields an empty list.
    """
    for candidate in _reply_candidates(raw_text or ""):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if not isinstance(parsed, list):
            continue
        suggestions = []
        for record in parsed:
            suggestion = _to_suggestion(record)
            if suggestion is None:
                logger.debug("Dropping malformed suggestion record: %r", record)
                continue
            suggestions.append(suggestion)
        return suggestions

    logger.warning("Could not parse a JSON array from the classification reply")
    return []


def suggest(
    uncategorized_paths: Sequence[str],
    areas: Mapping[str, AreaDefinition],
    sample_provider: SampleProvider,
    ai_client: Any,
) -> List[PathClassificationSuggestion]:
    """Ask the text-generation client to classify uncategorized paths.

    Args:
        uncategorized_paths: Paths no area currently owns
        areas: Existing area definitions, keyed by name
        sample_provider: Callable returning file text for a path, or None
        ai_client: Object exposing ``classify(prompt) -> str``

    Returns:
        Parsed suggestions; empty if the reply could not be parsed

    Raises:
        GenerationError: Transport and authorization failures propagate
    """
    if not uncategorized_paths:
        return []

    samples = collect_samples(uncategorized_paths, sample_provider)
    prompt = build_classification_prompt(uncategorized_paths, areas, samples)
    logger.info(
        "Requesting classification for %d paths (%d samples)",
        len(uncategorized_paths),
        len(samples),
    )
    raw_text = ai_client.classify(prompt)
    suggestions = parse_classification_reply(raw_text)
    logger.info("Received %d categorization suggestions", len(suggestions))
    return suggestions
