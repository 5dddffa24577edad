from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from truthguard.models.verdict import verdict

CONTENT_TYPES = ("text", "url")

SCORE_FLOOR = 0.1
SCORE_CEILING = 0.9

EXCERPT_LIMIT = 150
MAX_RED_FLAGS = 5
MAX_SOURCES = 3

METRIC_DEFINITIONS: tuple[tuple[str, str], ...] = (
    ("Source Credibility", "Evaluation of the source's reputation and reliability"),
    ("Factual Accuracy", "Assessment of verifiable facts presented in the content"),
    ("Context Fairness", "Whether appropriate context is provided for claims"),
    ("Emotional Language", "Presence of manipulative or highly charged language"),
    ("Citation Quality", "Credibility and relevance of sources cited"),
)


def _check_score(name: str, score: float) -> None:
    if not SCORE_FLOOR <= score <= SCORE_CEILING:
        raise ValueError(
            f"{name} must be within [{SCORE_FLOOR}, {SCORE_CEILING}], got {score!r}"
        )


@dataclass(frozen=True)
class ContentMetric:
    """One named sub-score of an analysis."""

    name: str
    description: str
    score: float

    def __post_init__(self) -> None:
        _check_score(f"Metric '{self.name}' score", self.score)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "score": self.score}


@dataclass(frozen=True)
class ContentSource:
    """A fact-checking citation attached to URL analyses."""

    title: str
    url: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "description": self.description}


@dataclass(frozen=True)
class AnalyzedContent:
    """The outcome of one analysis request. Never mutated once built."""

    id: str
    type: str
    title: str
    content: str
    excerpt: str
    analyzed_at: datetime
    truth_score: float
    metrics: tuple[ContentMetric, ...] = field(default_factory=tuple)
    red_flags: tuple[str, ...] = field(default_factory=tuple)
    factual_assessment: str = ""
    sources: tuple[ContentSource, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Lists are accepted and frozen into tuples.
        object.__setattr__(self, "metrics", tuple(self.metrics))
        object.__setattr__(self, "red_flags", tuple(self.red_flags))
        object.__setattr__(self, "sources", tuple(self.sources))

        if self.type not in CONTENT_TYPES:
            raise ValueError(f"Unknown content type {self.type!r}. Choose from {list(CONTENT_TYPES)}")

        _check_score("truth_score", self.truth_score)

        names = tuple(metric.name for metric in self.metrics)
        expected = tuple(name for name, _ in METRIC_DEFINITIONS)
        if names != expected:
            raise ValueError(f"Metrics must be exactly {list(expected)}, got {list(names)}")

        if len(self.red_flags) > MAX_RED_FLAGS:
            raise ValueError(f"At most {MAX_RED_FLAGS} red flags allowed, got {len(self.red_flags)}")
        if len(set(self.red_flags)) != len(self.red_flags):
            raise ValueError("Red flags must not contain duplicates")

        if self.type == "text" and self.sources:
            raise ValueError("Text analyses cannot carry sources")
        if len(self.sources) > MAX_SOURCES:
            raise ValueError(f"At most {MAX_SOURCES} sources allowed, got {len(self.sources)}")
        urls = [source.url for source in self.sources]
        if len(set(urls)) != len(urls):
            raise ValueError("Sources must have distinct URLs")

        if len(self.excerpt) > EXCERPT_LIMIT:
            raise ValueError(f"Excerpt exceeds {EXCERPT_LIMIT} characters")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "analyzed_at": self.analyzed_at.isoformat(),
            "truth_score": self.truth_score,
            "metrics": [metric.to_dict() for metric in self.metrics],
            "red_flags": list(self.red_flags),
            "factual_assessment": self.factual_assessment,
            "sources": [source.to_dict() for source in self.sources],
            "verdict": verdict(self.truth_score),
        }
