import re
from typing import Iterable, List, Set

from app.config import HIGHLIGHT_WINDOW, SCAN_MARK_OPEN, COMPARE_MARK_OPEN, MARK_CLOSE
from app.schemas.plagiarism_schemas import Candidate
from app.utils.lexical_utils import normalize_text, tokenize, word_projection

_SPACES_SPLIT = re.compile(r"(\s+)")
_NON_WORD_CHARS = re.compile(r"[^\w]")


def _source_pool(candidates: Iterable[Candidate]) -> List[str]:
    return [
        normalize_text(f"{c.snippet} {c.title} {c.body}")
        for c in candidates
    ]


def _matched_token_indices(tokens: List[str], pool: List[str], window: int = HIGHLIGHT_WINDOW) -> Set[int]:
    projection = word_projection(tokens)
    words = [(norm, idx) for idx, norm in enumerate(projection) if norm]

    matched: Set[int] = set()
    for i in range(len(words) - window + 1):
        span = words[i:i + window]
        phrase = " ".join(norm for norm, _ in span)
        if any(phrase in source for source in pool):
            # mark the whole token range, separators between the words included
            matched.update(range(span[0][1], span[-1][1] + 1))
    return matched


def wrap_runs(tokens: List[str], matched: Set[int],
              mark_open: str = SCAN_MARK_OPEN, mark_close: str = MARK_CLOSE) -> str:
    """Join tokens back together, wrapping each maximal run of matched indices once."""
    parts: List[str] = []
    open_run = False
    for idx, token in enumerate(tokens):
        is_match = idx in matched
        if is_match and not open_run:
            parts.append(mark_open)
            open_run = True
        elif not is_match and open_run:
            parts.append(mark_close)
            open_run = False
        parts.append(token)
    if open_run:
        parts.append(mark_close)
    return "".join(parts)


def highlight_matches(text: str, candidates: List[Candidate],
                      mark_open: str = SCAN_MARK_OPEN, mark_close: str = MARK_CLOSE) -> str:
    """
    Mark the spans of `text` whose 3-word windows appear verbatim in any candidate.

    Returns `text` untouched when there are no candidates.
    """
    if not candidates:
        return text

    tokens = tokenize(text)
    matched = _matched_token_indices(tokens, _source_pool(candidates))
    return wrap_runs(tokens, matched, mark_open, mark_close)


def highlight_shared_words(text: str, other_words: Set[str],
                           mark_open: str = COMPARE_MARK_OPEN, mark_close: str = MARK_CLOSE) -> str:
    """Wrap every whitespace-delimited word of `text` that occurs in `other_words`."""
    out: List[str] = []
    for part in _SPACES_SPLIT.split(text or ""):
        clean = _NON_WORD_CHARS.sub("", part.lower())
        if clean and clean in other_words:
            out.append(f"{mark_open}{part}{mark_close}")
        else:
            out.append(part)
    return "".join(out)
