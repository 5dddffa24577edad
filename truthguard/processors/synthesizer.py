from __future__ import annotations

import asyncio
import logging
import math
import random
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol, Sequence, TypeVar

from truthguard.models.errors import AnalysisFailure
from truthguard.models.types import (
    CONTENT_TYPES,
    EXCERPT_LIMIT,
    MAX_RED_FLAGS,
    METRIC_DEFINITIONS,
    SCORE_CEILING,
    SCORE_FLOOR,
    AnalyzedContent,
    ContentMetric,
    ContentSource,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUSPICION_PHRASES = [
    "secret",
    "shocking",
    "they don't want you to know",
    "conspiracy",
    "never reported",
    "mainstream media",
    "cover-up",
    "hoax",
]

CREDIBILITY_PHRASES = [
    "research",
    "study",
    "evidence",
    "according to experts",
    "verified",
    "peer-reviewed",
    "multiple sources",
    "data shows",
]

SUSPICION_PENALTY = 0.15
CREDIBILITY_BONUS = 0.10
METRIC_JITTER = 0.2

RED_FLAGS = [
    "Uses emotional language to manipulate readers",
    "Contains unverified claims without sources",
    "Presents opinions as facts without distinction",
    "Uses misleading statistics without context",
    "Omits important context that changes interpretation",
    "Contains logical fallacies in reasoning",
    "Attributes claims to unnamed or vague sources",
    "Uses loaded language designed to provoke emotion",
    "Makes claims that contradict established scientific consensus",
    "Uses old information presented as current",
]

FACTUAL_ASSESSMENTS = [
    "The content makes several claims that are not substantiated by evidence. "
    "While some elements may be factual, the overall framing is misleading.",
    "Our analysis found that while the basic facts presented are accurate, "
    "important context is missing that would significantly change how readers "
    "interpret the information.",
    "The content appears to be mostly factual, with proper attributions and "
    "verifiable claims. There are some minor inaccuracies but they don't "
    "significantly impact the overall message.",
    "Our analysis indicates that this content contains several factual "
    "inaccuracies and misleading statements. The central claims are not "
    "supported by available evidence.",
    "The content presents accurate information and properly attributes sources. "
    "Claims made are in line with expert consensus on the subject.",
    "While some facts presented are accurate, they are arranged in a way that "
    "creates a misleading narrative. Several claims lack proper context or "
    "substantiation.",
]

FACT_CHECK_SOURCES = [
    ContentSource(
        title="Reuters Fact Check",
        url="https://www.reuters.com/fact-check",
        description="Independent verification of related claims",
    ),
    ContentSource(
        title="Associated Press Fact Check",
        url="https://apnews.com/hub/ap-fact-check",
        description="Additional context on this topic",
    ),
    ContentSource(
        title="PolitiFact",
        url="https://www.politifact.com/",
        description="Rating of similar claims",
    ),
    ContentSource(
        title="FactCheck.org",
        url="https://www.factcheck.org/",
        description="Detailed analysis of this subject",
    ),
    ContentSource(
        title="Snopes",
        url="https://www.snopes.com/",
        description="Investigation of viral claims on this topic",
    ),
]

ARTICLE_TITLES = [
    "New Study Reveals Surprising Link Between Diet and Longevity",
    "Government Announces Major Policy Change on Climate Initiatives",
    "Tech Company Unveils Revolutionary AI Technology",
    "Scientists Discover Potential Breakthrough in Cancer Treatment",
    "Economic Report Shows Unexpected Growth in Third Quarter",
    "Health Officials Issue Warning About New Virus Strain",
    "International Relations Strained After Diplomatic Incident",
    "Research Suggests Benefits of New Educational Approach",
    "Environmental Group Challenges Industrial Development Plan",
    "Financial Markets React to Central Bank's Interest Rate Decision",
]

ELLIPSIS = "..."


class RandomSource(Protocol):
    """Anything yielding uniform floats in [0, 1). ``random.Random`` qualifies."""

    def random(self) -> float: ...


def clamp(value: float, low: float = SCORE_FLOOR, high: float = SCORE_CEILING) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_truth_score(content: str, base: float) -> float:
    """Bias *base* by the lexicon phrases found in *content* and clamp it.

    Every phrase is counted at most once; penalties and bonuses add up
    without a cap until the final clamp.
    """
    content_lower = content.lower()
    score = base
    for phrase in SUSPICION_PHRASES:
        if phrase in content_lower:
            score -= SUSPICION_PENALTY
    for phrase in CREDIBILITY_PHRASES:
        if phrase in content_lower:
            score += CREDIBILITY_BONUS
    return clamp(score)


def red_flag_count(truth_score: float) -> int:
    return max(0, min(MAX_RED_FLAGS, round_half_up((1 - truth_score) * 6)))


def assessment_index(truth_score: float, bank_size: int = len(FACTUAL_ASSESSMENTS)) -> int:
    return min(int(math.floor(truth_score * bank_size)), bank_size - 1)


def make_excerpt(content: str, limit: int = EXCERPT_LIMIT) -> str:
    if len(content) <= limit:
        return content
    return content[: limit - len(ELLIPSIS)] + ELLIPSIS


class ContentSynthesizer:
    """Produces simulated truthfulness analyses.

    There is no analysis engine behind this: the score is a uniform random
    base nudged by keyword lexicons, and every other field is derived from
    that score plus more random draws from fixed pools. All randomness goes
    through ``rng`` so callers can pin it down.
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        min_delay: float = 1.5,
        max_delay: float = 2.5,
        sleep: Callable[[float], Awaitable[object]] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(f"Invalid delay range [{min_delay}, {max_delay}]")
        self.rng = rng or random.Random()
        self.min_delay = min_delay
        self.max_delay = max_delay
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    async def synthesize(self, content: str, content_type: str) -> AnalyzedContent:
        """Analyse *content* after a simulated processing delay."""
        try:
            delay = self.min_delay + self.rng.random() * (self.max_delay - self.min_delay)
            logger.debug("Simulating analysis latency of %.2fs", delay)
            await self._sleep(delay)
            return self.build(content, content_type)
        except Exception as exc:
            logger.error("Analysis of %s content failed: %s", content_type, exc)
            raise AnalysisFailure(f"Analysis failed: {exc}") from exc

    def build(self, content: str, content_type: str) -> AnalyzedContent:
        if content_type not in CONTENT_TYPES:
            raise ValueError(
                f"Unknown content type {content_type!r}. Choose from {list(CONTENT_TYPES)}"
            )

        truth_score = compute_truth_score(content, self.rng.random())

        metrics = [
            ContentMetric(
                name=name,
                description=description,
                score=clamp(truth_score + self._jitter()),
            )
            for name, description in METRIC_DEFINITIONS
        ]

        drawn_flags = [self._pick(RED_FLAGS) for _ in range(red_flag_count(truth_score))]
        red_flags = list(dict.fromkeys(drawn_flags))

        factual_assessment = FACTUAL_ASSESSMENTS[assessment_index(truth_score)]

        sources: list[ContentSource] = []
        if content_type == "url":
            count = self._pick([1, 2, 3])
            seen: set[str] = set()
            for _ in range(count):
                source = self._pick(FACT_CHECK_SOURCES)
                if source.url not in seen:
                    seen.add(source.url)
                    sources.append(source)

        result = AnalyzedContent(
            id=str(uuid.uuid4()),
            type=content_type,
            title=self._pick(ARTICLE_TITLES),
            content=content,
            excerpt=make_excerpt(content),
            analyzed_at=self._clock(),
            truth_score=truth_score,
            metrics=metrics,
            red_flags=red_flags,
            factual_assessment=factual_assessment,
            sources=sources,
        )
        logger.info(
            "Analysed %s content %s: truth_score=%.2f red_flags=%d sources=%d",
            content_type,
            result.id,
            truth_score,
            len(red_flags),
            len(sources),
        )
        return result

    def _jitter(self) -> float:
        return self.rng.random() * (2 * METRIC_JITTER) - METRIC_JITTER

    def _pick(self, items: Sequence[T]) -> T:
        index = int(math.floor(self.rng.random() * len(items)))
        return items[min(index, len(items) - 1)]
