"""Document statistics and readability scores."""

from __future__ import annotations

import math
import re

from pydantic import BaseModel

WORDS_PER_MINUTE = 200

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_VOWEL_GROUPS = re.compile(r"[aeiouy]+")

READABILITY_LEVELS = [
    (6, "Elementary", "Very easy to read"),
    (8, "Middle School", "Easy to read"),
    (10, "High School", "Moderately easy"),
    (12, "College", "Moderately difficult"),
    (16, "University", "Difficult"),
]


class DocumentStats(BaseModel):
    words: int
    characters: int
    reading_time: int  # minutes, rounded up
    flesch_kincaid: float  # grade level
    flesch_reading_ease: float


def _words(text: str) -> list[str]:
    return text.split()


def _sentence_count(text: str) -> int:
    return sum(1 for s in _SENTENCE_SPLIT.split(text) if s.strip())


def count_syllables(word: str) -> int:
    """Rough English syllable count: vowel groups, minus a silent trailing e."""
    word = re.sub(r"[^a-z]", "", word.lower())
    if len(word) <= 3:
        return 1
    syllables = len(_VOWEL_GROUPS.findall(word))
    if word.endswith("e") and syllables > 1:
        syllables -= 1
    return max(1, syllables)


def flesch_kincaid_grade(text: str) -> float:
    words = _words(text)
    sentences = _sentence_count(text)
    if not words or not sentences:
        return 0.0
    syllables = sum(count_syllables(w) for w in words)
    score = 0.39 * (len(words) / sentences) + 11.8 * (syllables / len(words)) - 15.59
    return round(score, 1)


def flesch_reading_ease(text: str) -> float:
    words = _words(text)
    sentences = _sentence_count(text)
    if not words or not sentences:
        return 0.0
    syllables = sum(count_syllables(w) for w in words)
    score = 206.835 - 1.015 * (len(words) / sentences) - 84.6 * (syllables / len(words))
    return round(score, 1)


def readability_level(grade: float) -> tuple[str, str]:
    for limit, level, description in READABILITY_LEVELS:
        if grade <= limit:
            return level, description
    return "Graduate", "Very difficult"


def document_stats(text: str) -> DocumentStats:
    words = _words(text)
    return DocumentStats(
        words=len(words),
        characters=len(text),
        reading_time=math.ceil(len(words) / WORDS_PER_MINUTE),
        flesch_kincaid=flesch_kincaid_grade(text),
        flesch_reading_ease=flesch_reading_ease(text),
    )
