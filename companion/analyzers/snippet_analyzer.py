"""Snippet analyzer orchestrator.

Runs the resolver, the metrics scan, the structural extractor and the
insight synthesizer in order and assembles an immutable AnalysisResult.
Every stage is pure, so the same input always yields an equal result.
"""

from __future__ import annotations

import logging
from typing import Optional

from .insights import synthesize
from .languages import DEFAULT_LANGUAGE, parse_language
from .metrics import extract_metrics
from .models import AnalysisInput, AnalysisResult, AnalysisSettings
from .resolver import resolve_language
from .structure import extract_functions

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE = """\
import { fetchJson } from '@acme/http';

// Loads a user profile and the team it belongs to.
export async function loadUserProfile(userId: string, includeTeam = false): Promise<Profile> {
  if (!userId) {
    throw new Error('userId is required');
  }
  const user = await fetchJson(`/api/users/${userId}`);
  if (includeTeam && user.teamId) {
    user.team = await fetchJson(`/api/teams/${user.teamId}`);
  }
  return user;
}

export const isActiveProfile = (profile: Profile): boolean =>
  profile.status === 'active' || profile.status === 'trial';
"""


def analyze_code(
    code: str,
    language: Optional[str] = DEFAULT_LANGUAGE.value,
    settings: Optional[AnalysisSettings] = None,
) -> AnalysisResult:
    """Analyze a snippet and return every derived artifact.

    ``language`` is the user's hint; it may be overridden by detection.
    Never raises for any string input.
    """
    settings = settings or AnalysisSettings()
    code = code or ""
    hint = parse_language(language) or DEFAULT_LANGUAGE

    detected = resolve_language(code, hint.value, threshold=settings.detection_threshold)
    metrics = extract_metrics(code, detected)
    functions = extract_functions(code, detected, limit=settings.max_functions)
    insights = synthesize(code, metrics, functions, detected, hint, settings)

    logger.debug(
        "Analyzed %d lines as %s (hint %s): %d callables",
        metrics.lines_of_code, detected.value, hint.value, len(functions),
    )
    return AnalysisResult(
        detected_language=detected.value,
        language_hint=hint.value,
        summary=insights.summary,
        functions=functions,
        metrics=metrics,
        suggestions=insights.suggestions,
        test_ideas=insights.test_ideas,
        quick_wins=insights.quick_wins,
        docstring=insights.docstring,
        refactor_plan=insights.refactor_plan,
        checklist=insights.checklist,
        resources=insights.resources,
    )


class SnippetAnalyzer:
    """Analyzer bound to one set of thresholds."""

    def __init__(self, settings: Optional[AnalysisSettings] = None):
        self.settings = settings or AnalysisSettings()

    def analyze(self, request: AnalysisInput) -> AnalysisResult:
        return analyze_code(request.code, request.language_hint, self.settings)

    def analyze_code(self, code: str, language: Optional[str] = None) -> AnalysisResult:
        return analyze_code(code, language or DEFAULT_LANGUAGE.value, self.settings)
