import re

from app.config import SCAN_MARK_OPEN, COMPARE_MARK_OPEN, MARK_CLOSE
from app.schemas.plagiarism_schemas import Candidate
from app.utils.highlight_utils import highlight_matches, highlight_shared_words, wrap_runs

MARK = re.compile(r"</?mark[^>]*>")


def _candidate(body="", snippet="", title="Source"):
    return Candidate(title=title, url="https://example.org/a", body=body, snippet=snippet,
                     is_private=False, score=50)


def test_no_candidates_returns_text_unchanged():
    text = "Anything <b>at</b> all, untouched."
    assert highlight_matches(text, []) == text


def test_marks_three_word_window_found_in_source():
    text = "The quick brown fox jumps over the lazy dog."
    html = highlight_matches(text, [_candidate(body="a quick brown fox leapt")])
    assert html == f"The {SCAN_MARK_OPEN}quick brown fox{MARK_CLOSE} jumps over the lazy dog."


def test_overlapping_windows_merge_into_one_span():
    text = "The quick brown fox jumps over the lazy dog."
    html = highlight_matches(text, [_candidate(snippet="quick brown fox jumps")])
    assert html.count("<mark") == 1
    assert f"{SCAN_MARK_OPEN}quick brown fox jumps{MARK_CLOSE}" in html


def test_window_spans_punctuation_between_words():
    text = "Hello, dear old friend."
    html = highlight_matches(text, [_candidate(body="hello dear old friend")])
    assert html == f"{SCAN_MARK_OPEN}Hello, dear old friend{MARK_CLOSE}."


def test_any_candidate_in_the_pool_can_match():
    text = "first second third and then fourth fifth sixth"
    cands = [_candidate(body="first second third"), _candidate(body="fourth fifth sixth")]
    html = highlight_matches(text, cands)
    assert html.count("<mark") == 2


def test_markers_are_the_only_change():
    text = "Copied: the results were analysed (twice)!  Then nothing else matched."
    html = highlight_matches(text, [_candidate(body="the results were analysed twice")])
    assert "<mark" in html
    assert MARK.sub("", html) == text


def test_wrap_runs_closes_open_run_at_end():
    assert wrap_runs(["a", " ", "b"], {2}, "[", "]") == "a [b]"
    assert wrap_runs(["a", " ", "b"], set(), "[", "]") == "a b"


def test_shared_words_highlighted_individually():
    html = highlight_shared_words("The cat sat", {"the", "cat", "ran"})
    assert html == f"{COMPARE_MARK_OPEN}The{MARK_CLOSE} {COMPARE_MARK_OPEN}cat{MARK_CLOSE} sat"


def test_shared_words_strip_punctuation_before_lookup():
    html = highlight_shared_words("Cat, dog.", {"cat"})
    assert html == f"{COMPARE_MARK_OPEN}Cat,{MARK_CLOSE} dog."
