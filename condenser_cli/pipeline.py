"""End-to-end flows: summarize a packed repository, categorize a repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .classifier import SampleProvider, suggest
from .config import DEFAULT_CONFIDENCE_THRESHOLD, DEFAULT_MAX_TOKENS, SUMMARY_MARKDOWN_FILE, SUMMARY_XML_FILE
from .config_manager import read_config, save_config
from .extractor import extract
from .fallback import describe_exception, generate_fallback
from .llm import GenerationError, TextGenerationClient, build_summary_content
from .merger import MergeResult, merge
from .models import ExtractionResult, PathClassificationSuggestion, ProjectConfig
from .repo_scan import FileSampleProvider, collect_repository_paths
from .resolver import find_uncategorized_paths

logger = logging.getLogger(__name__)


@dataclass
class SummaryOutcome:
    result: ExtractionResult
    markdown_path: Path
    xml_path: Path
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CategorizationReport:
    config: ProjectConfig
    uncategorized: List[str] = field(default_factory=list)
    merge_result: Optional[MergeResult] = None
    saved: bool = False

    @property
    def suggestions(self) -> List[PathClassificationSuggestion]:
        return self.merge_result.suggestions if self.merge_result else []


def write_artifacts(output_dir: Path, result: ExtractionResult) -> Tuple[Path, Path]:
    """Write ``summary.md`` and ``summary.xml`` into ``output_dir``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    markdown_path = output_dir / SUMMARY_MARKDOWN_FILE
    xml_path = output_dir / SUMMARY_XML_FILE
    markdown_path.write_text(result.narrative, encoding="utf-8")
    xml_path.write_text(result.structured, encoding="utf-8")
    return markdown_path, xml_path


def summarize_codebase(
    input_path: Path,
    output_dir: Path,
    client: TextGenerationClient,
    system_prompt: str = "",
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> SummaryOutcome:
    """Summarize a packed repository into Markdown and XML artifacts.

    Any generation failure is converted into the fallback artifact pair, so
    both files always exist afterwards; ``SummaryOutcome.error`` reports it.

    Args:
        input_path: Packed repository document
        output_dir: Directory for ``summary.md`` and ``summary.xml``
        client: Configured text-generation client
        system_prompt: Guidance prompt (see ``config_manager.resolve_prompt``)
        max_tokens: Maximum tokens for the reply

    Returns:
        SummaryOutcome describing what was written
    """
    content = Path(input_path).read_text(encoding="utf-8", errors="replace")
    error: Optional[str] = None

    try:
        logger.info("Sending request to %s API", client.provider.name)
        reply = client.generate(build_summary_content(content), system_prompt, max_tokens)
        result = extract(reply)
    except GenerationError as exc:
        logger.error("Generation failed: %s", exc)
        error = describe_exception(exc)
        result = generate_fallback(error)
    except Exception as exc:
        logger.exception("Unexpected error during summary generation")
        error = describe_exception(exc)
        result = generate_fallback(error)

    markdown_path, xml_path = write_artifacts(output_dir, result)
    return SummaryOutcome(result=result, markdown_path=markdown_path, xml_path=xml_path, error=error)


def categorize_repository(
    repo_root: Path,
    config_path: Path,
    client,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    dry_run: bool = False,
    sample_provider: Optional[SampleProvider] = None,
) -> CategorizationReport:
    """Classify uncategorized paths with AI help and update the config.

    Args:
        repo_root: Repository to scan
        config_path: Area configuration to read and update
        client: Object exposing ``classify(prompt) -> str``
        confidence_threshold: Minimum confidence to auto-apply
        dry_run: Report suggestions without saving
        sample_provider: Override for reading file samples

    Returns:
        CategorizationReport with gaps, suggestions, and merge outcome

    Raises:
        ValueError: If the configuration is missing or malformed
        GenerationError: If the classification request fails
    """
    loaded = read_config(config_path)
    if loaded.config is None:
        reason = f": {loaded.error}" if loaded.error else ""
        raise ValueError(f"Could not load configuration from {config_path}{reason}")
    config = loaded.config

    uncategorized = find_uncategorized_paths(collect_repository_paths(repo_root), config)
    report = CategorizationReport(config=config, uncategorized=uncategorized)
    if not uncategorized:
        logger.info("No uncategorized paths found. Configuration is up to date.")
        return report

    logger.info("Found %d uncategorized paths", len(uncategorized))
    suggestions = suggest(
        uncategorized,
        config.areas,
        sample_provider or FileSampleProvider(repo_root),
        client,
    )
    report.merge_result = merge(config, suggestions, confidence_threshold)

    if report.merge_result.changed and not dry_run:
        save_config(config_path, config)
        report.saved = True
    return report
