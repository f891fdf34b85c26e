from pydantic import BaseModel, Field
from typing import List, Optional, Tuple

VAULT_LOCATOR_PREFIX = "internal://vault/"


def vault_locator(owner_id: str, document_id: str) -> str:
    return f"{VAULT_LOCATOR_PREFIX}{owner_id}/{document_id}"


def vault_locator_parts(url: str) -> Optional[Tuple[str, str]]:
    """(owner_id, document_id) for an internal vault locator, None for anything else."""
    if not url.startswith(VAULT_LOCATOR_PREFIX):
        return None
    owner_id, _, document_id = url[len(VAULT_LOCATOR_PREFIX):].partition("/")
    if not owner_id or not document_id:
        return None
    return owner_id, document_id


class Candidate(BaseModel):
    """A scored potential source, alive for one scan only."""
    title: str
    url: str            # external URL or internal://vault/{ownerId}/{documentId}
    body: str = ""      # text the candidate was scored against
    snippet: str = ""
    is_private: bool
    score: int = Field(ge=0, le=100)

    def to_source(self) -> "SourceMatch":
        return SourceMatch(title=self.title, url=self.url, score=self.score, is_private=self.is_private)


class SourceMatch(BaseModel):
    title: str
    url: str
    score: int
    is_private: bool


class PlagiarismResult(BaseModel):
    score: int = 0
    summary: str
    highlighted_html: Optional[str] = None
    sources: List[SourceMatch] = Field(default_factory=list)


class ComparisonResult(BaseModel):
    score: int
    summary: str
    highlighted_text_a: str
    highlighted_text_b: str


# ---- Requests ----

class ScanRequest(BaseModel):
    text: str
    check_vault: bool = True
    search_web: bool = True


class CompareRequest(BaseModel):
    text_a: str
    text_b: str
