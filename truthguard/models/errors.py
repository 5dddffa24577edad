from __future__ import annotations


class AnalysisFailure(Exception):
    """Raised when a content analysis could not be produced.

    The original error is chained as ``__cause__``.
    """
