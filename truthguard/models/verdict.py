from __future__ import annotations

import math
from typing import Any

TRUTHFUL_THRESHOLD = 70
AMBIGUOUS_THRESHOLD = 40

LABELS = {
    "truthful": "Likely Truthful",
    "ambiguous": "Potentially Misleading",
    "misleading": "Likely Misleading",
}

MESSAGES = {
    "truthful": "Likely truthful content",
    "ambiguous": "Content contains potentially misleading elements",
    "misleading": "Content appears highly misleading",
}

HISTORY_TAGS = {
    "truthful": "Truthful",
    "ambiguous": "Ambiguous",
    "misleading": "Misleading",
}


def score_percentage(score: float) -> int:
    return int(math.floor(score * 100 + 0.5))


def score_band(score: float) -> str:
    """Band an overall truth score by its rounded percentage."""
    percentage = score_percentage(score)
    if percentage >= TRUTHFUL_THRESHOLD:
        return "truthful"
    if percentage >= AMBIGUOUS_THRESHOLD:
        return "ambiguous"
    return "misleading"


def metric_band(score: float) -> str:
    """Band a metric sub-score on the raw value, without rounding."""
    if score >= TRUTHFUL_THRESHOLD / 100:
        return "truthful"
    if score >= AMBIGUOUS_THRESHOLD / 100:
        return "ambiguous"
    return "misleading"


def verdict(score: float) -> dict[str, Any]:
    band = score_band(score)
    return {
        "band": band,
        "label": LABELS[band],
        "message": MESSAGES[band],
        "percentage": score_percentage(score),
    }
