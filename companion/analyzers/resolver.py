"""Language resolver: reconcile the user's language hint with textual signals."""
from __future__ import annotations

import logging
from typing import Optional

from .languages import (
    DEFAULT_LANGUAGE,
    DETECTION_ORDER,
    LANGUAGE_SPECS,
    LanguageId,
    parse_language,
)

logger = logging.getLogger(__name__)

# A single signal stops contributing after this many matches
MAX_MATCHES_PER_SIGNAL = 5

DEFAULT_DETECTION_THRESHOLD = 3


def score_languages(code: str) -> dict[LanguageId, int]:
    """Score every supported language against the snippet's idioms."""
    scores: dict[LanguageId, int] = {}
    for lang_id, spec in LANGUAGE_SPECS.items():
        score = 0
        for pattern, weight in spec.signals:
            hits = 0
            for _ in pattern.finditer(code):
                hits += 1
                if hits >= MAX_MATCHES_PER_SIGNAL:
                    break
            score += weight * hits
        scores[lang_id] = score
    return scores


def resolve_language(
    code: str,
    hint: Optional[str] = None,
    threshold: int = DEFAULT_DETECTION_THRESHOLD,
) -> LanguageId:
    """Return the language that best explains the snippet.

    The top scorer wins once it reaches ``threshold``; ties go to the hint,
    then to DETECTION_ORDER. Below the threshold the hint is returned as-is.
    Unknown hints fall back to the default language. Never raises.
    """
    hint_id = parse_language(hint) or DEFAULT_LANGUAGE
    if not code or not code.strip():
        return hint_id

    scores = score_languages(code)
    best = max(scores.values())
    if best < threshold:
        logger.debug("No language reached threshold %d (best=%d); using hint %s",
                     threshold, best, hint_id.value)
        return hint_id

    if scores[hint_id] == best:
        return hint_id
    for lang_id in DETECTION_ORDER:
        if scores[lang_id] == best:
            logger.debug("Detected %s (score=%d) over hint %s (score=%d)",
                         lang_id.value, best, hint_id.value, scores[hint_id])
            return lang_id
    return hint_id
