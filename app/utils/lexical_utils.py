import re
from typing import List, Set

from app.config import (
    MIN_WORD_LENGTH,
    PHRASE_LENGTH,
    MAX_PHRASE_SAMPLES,
    JACCARD_WEIGHT,
    SEQUENCE_WEIGHT,
    SCORE_SCALE,
    QUERY_MIN_WORD_LENGTH,
    QUERY_WORDS,
    SECOND_QUERY_MIN_WORDS,
)

# Python's re module matches \w against Unicode word characters
# (letters and digits of any script, plus underscore).
_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_TOKEN_SPLIT = re.compile(r"""(\s+|[.!?,"';:()]+)""")


def normalize_text(text: str) -> str:
    if not text:
        return ""
    text = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str) -> List[str]:
    """
    Split text into content and separator pieces.
    Joining the pieces gives back the original text exactly.
    """
    if not text:
        return []
    return [piece for piece in _TOKEN_SPLIT.split(text) if piece]


def word_projection(tokens: List[str]) -> List[str]:
    """Normalized form of each token; separators and punctuation project to ""."""
    return [normalize_text(tok) for tok in tokens]


def _content_words(norm_text: str, min_length: int = MIN_WORD_LENGTH) -> List[str]:
    return [w for w in norm_text.split(" ") if len(w) >= min_length]


def _jaccard(a: Set[str], b: Set[str]) -> float:
    if not a and not b:
        return 0.0
    inter = len(a & b)
    union = len(a | b) or 1
    return inter / union


def _phrase_starts(word_count: int, phrase_length: int = PHRASE_LENGTH,
                   max_samples: int = MAX_PHRASE_SAMPLES) -> List[int]:
    """Start offsets of the sampled phrases, spread evenly when there are too many."""
    possible = word_count - phrase_length + 1
    if possible <= 0:
        return []
    if possible <= max_samples:
        return list(range(possible))
    last = possible - 1
    return [(i * last) // (max_samples - 1) for i in range(max_samples)]


def _sequence_match(words: List[str], norm_target: str) -> float:
    starts = _phrase_starts(len(words))
    if not starts:
        return 0.0
    found = 0
    for i in starts:
        phrase = " ".join(words[i:i + PHRASE_LENGTH])
        if phrase in norm_target:
            found += 1
    return found / len(starts)


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def calculate_similarity(text: str, target: str) -> int:
    """
    Heuristic 0-100 overlap score of `text` against `target`:
      - Jaccard over the sets of words of three or more characters
      - share of sampled 4-word phrases of `text` found verbatim in `target`
    The phrase signal carries most of the weight; the result is scaled up
    and clamped at 100. Useful for ranking and thresholds only.
    """
    norm_text = normalize_text(text)
    norm_target = normalize_text(target)

    words1 = _content_words(norm_text)
    words2 = _content_words(norm_target)
    if not words1 or not words2:
        return 0

    if norm_text == norm_target:
        return 100

    jaccard = _jaccard(set(words1), set(words2))
    sequence = _sequence_match(words1, norm_target)

    score = jaccard * JACCARD_WEIGHT + sequence * SEQUENCE_WEIGHT
    return min(100, _round_half_up(score * 100 * SCORE_SCALE))


def extract_search_queries(text: str) -> List[str]:
    """Build at most two short search queries: one from the start, one from the middle."""
    words = [w for w in (text or "").split() if len(w) >= QUERY_MIN_WORD_LENGTH]
    if not words:
        return []

    queries = [" ".join(words[:QUERY_WORDS])]
    if len(words) >= SECOND_QUERY_MIN_WORDS:
        mid = len(words) // 2
        queries.append(" ".join(words[mid:mid + QUERY_WORDS]))
    return queries


def vocabulary(text: str, min_length: int = 2) -> Set[str]:
    return set(_content_words(normalize_text(text), min_length))
