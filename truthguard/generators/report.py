from __future__ import annotations

import logging
import textwrap
from typing import Iterable

from truthguard.models.types import AnalyzedContent
from truthguard.models.verdict import HISTORY_TAGS, metric_band, score_band, score_percentage, verdict

logger = logging.getLogger(__name__)

LINE_WIDTH = 72
BAR_WIDTH = 20


def _bar(score: float) -> str:
    filled = int(round(score * BAR_WIDTH))
    return "[" + "#" * filled + "-" * (BAR_WIDTH - filled) + "]"


class ReportGenerator:
    """Renders analyses as plain-text reports for terminals and logs."""

    def __init__(self, width: int = LINE_WIDTH) -> None:
        self.width = width

    def render(self, result: AnalyzedContent) -> list[str]:
        summary = verdict(result.truth_score)

        lines: list[str] = [
            result.title,
            f"Analyzed {result.analyzed_at:%b %d, %H:%M} ({result.type} content)",
            "",
            f"{summary['label']}: {summary['percentage']}% Truth Score",
            _bar(result.truth_score),
            "",
            "Detailed Analysis",
        ]

        for metric in result.metrics:
            lines.append(
                f"  {metric.name:<20} {_bar(metric.score)} "
                f"{score_percentage(metric.score):>3}% ({metric_band(metric.score)})"
            )
            lines.append(f"    {metric.description}")

        if result.red_flags:
            lines.append("")
            lines.append("Potential Issues Detected")
            for flag in result.red_flags:
                lines.append(f"  ! {flag}")

        lines.append("")
        lines.append("Factual Assessment")
        lines.extend(
            textwrap.wrap(
                result.factual_assessment,
                width=self.width,
                initial_indent="  ",
                subsequent_indent="  ",
            )
        )

        if result.sources:
            lines.append("")
            lines.append("Related Information Sources")
            for source in result.sources:
                lines.append(f"  - {source.title} <{source.url}>")
                lines.append(f"    {source.description}")

        return lines

    def history_lines(self, items: Iterable[AnalyzedContent]) -> list[str]:
        items = list(items)
        if not items:
            return ["No Analysis History"]

        lines = [f"Previously Analyzed Content ({len(items)} items)"]
        for item in items:
            tag = HISTORY_TAGS[score_band(item.truth_score)]
            lines.append(
                f"{score_percentage(item.truth_score)}% {tag} | {item.title} "
                f"| {item.type.capitalize()} content"
            )
            lines.append(f"  {textwrap.shorten(item.excerpt, width=self.width, placeholder='...')}")
        return lines
