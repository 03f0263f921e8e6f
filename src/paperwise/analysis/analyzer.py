"""Claude-backed writing analysis producing substring-replacement suggestions."""

from __future__ import annotations

import logging

from paperwise.cache.analysis_cache import AnalysisCache
from paperwise.clients.llm_client import DEFAULT_MODEL, LLMClient
from paperwise.errors import AnalysisFailed
from paperwise.models.analysis import AnalysisSettings

logger = logging.getLogger(__name__)

ANALYZE_SYSTEM = """\
You are an expert writing assistant. Analyze the user's text for spelling, grammar,
style, clarity, and tone issues.

Writing context:
- Formality: {formality}
- Audience: {audience}
- Domain: {domain}

Rules:
1. "originalText" MUST be an exact substring of the user's text, copied character for character.
2. Keep "originalText" as short as possible while still unambiguous.
3. Report suggestions in the order they appear in the text.
4. Do not report overlapping suggestions.
5. If there are no issues, return [].

Respond with a JSON array only:
[{{"type": "spelling|grammar|style|clarity|tone", "originalText": "...", "suggestion": "...", "explanation": "..."}}]"""

_WRAPPER_KEYS = ("suggestions", "results", "items", "data")


class SuggestionAnalyzer:
    """Implements ``analyze(text, settings)`` on top of :class:`LLMClient`.

    Returns the raw engine entries; validation and location happen when the
    suggestion store merges them.
    """

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_tokens: int = 4096,
        cache: AnalysisCache | None = None,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.cache = cache

    async def __call__(self, text: str, settings: AnalysisSettings) -> list[dict]:
        return await self.analyze(text, settings)

    async def analyze(self, text: str, settings: AnalysisSettings | None = None) -> list[dict]:
        settings = settings or AnalysisSettings()
        if not text.strip():
            return []

        if self.cache is not None:
            cached = self.cache.get(text, settings)
            if cached is not None:
                logger.debug("Analysis cache hit (%d chars)", len(text))
                return cached

        system = ANALYZE_SYSTEM.format(
            formality=settings.formality.value,
            audience=settings.audience.value,
            domain=settings.domain.value,
        )
        prompt = f"Text to analyze:\n\n{text}"

        logger.info("Analyzing %d chars (%s/%s/%s)", len(text), settings.formality.value,
                    settings.audience.value, settings.domain.value)
        try:
            data = await self.llm.generate_json(
                prompt=prompt,
                system=system,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except ValueError as e:
            raise AnalysisFailed(f"Invalid JSON response from analysis engine: {e}") from e
        except Exception as e:
            raise AnalysisFailed(f"Analysis request failed: {e}") from e

        entries = unwrap_entries(data)
        if self.cache is not None:
            self.cache.put(text, settings, entries)
        return entries


def unwrap_entries(data) -> list[dict]:
    """Normalize the shapes engines answer with into a flat list of entries.

    Accepts a bare array, an object wrapping the array (``{"suggestions": [...]}``),
    or a per-chunk mapping (``{"results": {"chunk1": [...], ...}}``).
    """
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    if not isinstance(data, dict):
        raise AnalysisFailed(f"Unexpected analysis response type: {type(data).__name__}")

    for key in _WRAPPER_KEYS:
        if key in data:
            return unwrap_entries(data[key])

    # per-chunk mapping without a wrapper
    if data and all(isinstance(v, list) for v in data.values()):
        return [item for v in data.values() for item in v if isinstance(item, dict)]
    if not data:
        return []
    raise AnalysisFailed("Analysis response contained no suggestion list")
