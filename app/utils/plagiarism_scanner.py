import logging
from typing import List, Optional

from app.config import ScanSettings
from app.schemas.plagiarism_schemas import (
    Candidate, PlagiarismResult, ComparisonResult, vault_locator,
)
from app.schemas.report_schemas import VaultDocument
from app.schemas.sources_schemas import SearchItem
from app.utils.highlight_utils import highlight_matches, highlight_shared_words
from app.utils.lexical_utils import calculate_similarity, extract_search_queries, vocabulary
from app.utils.web_utils import SearchFn, fetch_search_results, search_web

logger = logging.getLogger("scanner.engine")

TOO_SHORT_SUMMARY = "Input content is too short for a reliable scan."


def vault_candidates(text: str, documents: List[VaultDocument], min_score: int) -> List[Candidate]:
    out = []
    for doc in documents:
        score = calculate_similarity(text, doc.content)
        if score > min_score:
            out.append(Candidate(
                title=doc.title,
                url=vault_locator(doc.owner_id, doc.id),
                body=doc.content,
                is_private=True,
                score=score,
            ))
    return out


def web_candidates(text: str, items: List[SearchItem], min_score: int) -> List[Candidate]:
    out = []
    for item in items:
        score = calculate_similarity(text, f"{item.snippet} {item.title}")
        if score >= min_score:
            out.append(Candidate(
                title=item.title,
                url=item.url,
                snippet=item.snippet,
                is_private=False,
                score=score,
            ))
    return out


def aggregate_candidates(candidates: List[Candidate]) -> List[Candidate]:
    """Highest score first, one entry per locator (the best-scoring one)."""
    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    seen = set()
    unique = []
    for c in ranked:
        if c.url in seen:
            continue
        seen.add(c.url)
        unique.append(c)
    return unique


class PlagiarismScanner:
    def __init__(self, settings: Optional[ScanSettings] = None, search: SearchFn = search_web):
        self.settings = settings or ScanSettings.from_env()
        self.search = search

    def _summary(self, top_score: int, source_count: int, include_web: bool) -> str:
        scan_context = "web and vault" if include_web else "private vault"
        if source_count == 0:
            return f"No significant matches found in your {scan_context}."
        if top_score > self.settings.thresholds.high_similarity_score:
            return (f"High similarity detected ({top_score}%). "
                    f"Content appears in {source_count} external sources.")
        return f"Audit complete: {top_score}% overlap detected across {source_count} sources."

    def _web_candidates(self, text: str) -> List[Candidate]:
        queries = extract_search_queries(text)
        logger.info(f"Built {len(queries)} search queries")
        batches = fetch_search_results(queries, self.settings, search=self.search)
        out: List[Candidate] = []
        for items in batches:
            out.extend(web_candidates(text, items, self.settings.thresholds.web_min_score))
        return out

    def scan(self, text: str, vault_documents: List[VaultDocument], include_web: bool = True) -> PlagiarismResult:
        thresholds = self.settings.thresholds
        if not text or len(text.strip()) < thresholds.min_scan_length:
            return PlagiarismResult(score=0, summary=TOO_SHORT_SUMMARY, sources=[])

        candidates = vault_candidates(text, vault_documents, thresholds.vault_min_score)
        logger.info(f"Vault: {len(candidates)}/{len(vault_documents)} documents above threshold")

        if include_web and self.settings.search_enabled:
            candidates.extend(self._web_candidates(text))
        elif include_web:
            logger.warning("Web search requested but no search credentials are configured")

        unique = aggregate_candidates(candidates)
        top_score = max((c.score for c in unique), default=0)

        result = PlagiarismResult(
            score=min(100, top_score),
            summary=self._summary(top_score, len(unique), include_web),
            highlighted_html=highlight_matches(text, unique),
            sources=[c.to_source() for c in unique],
        )
        logger.info(f"Scan complete: score={result.score}, sources={len(result.sources)}")
        return result

    def compare(self, text_a: str, text_b: str) -> ComparisonResult:
        score = calculate_similarity(text_a, text_b)
        words_a = vocabulary(text_a)
        words_b = vocabulary(text_b)

        if score > self.settings.thresholds.compare_high_score:
            summary = "High structural overlap detected between both documents."
        else:
            summary = "Low direct overlap, but some matching keywords identified."

        return ComparisonResult(
            score=score,
            summary=summary,
            highlighted_text_a=highlight_shared_words(text_a, words_b),
            highlighted_text_b=highlight_shared_words(text_b, words_a),
        )
