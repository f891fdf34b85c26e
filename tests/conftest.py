import itertools
from datetime import datetime
from typing import Dict, List

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import JWT_SECRET_KEY, JWT_ALGORITHM, ScanSettings
from app.dependencies.auth import get_scanner, get_vault_store
from app.main import app
from app.schemas.plagiarism_schemas import PlagiarismResult
from app.schemas.report_schemas import VaultDocument, ScanRecord
from app.schemas.sources_schemas import SearchItem
from app.utils.plagiarism_scanner import PlagiarismScanner


class InMemoryVaultStore:
    """Same interface as VaultStore, backed by dicts."""

    def __init__(self):
        self.roles: Dict[str, str] = {}
        self.documents: Dict[str, List[VaultDocument]] = {}
        self.scans: List[ScanRecord] = []
        self.failing_owners = set()
        self.fail_saves = False
        self._ids = itertools.count(1)

    def add_user(self, user_id: str, role: str = "user"):
        self.roles[user_id] = role
        self.documents.setdefault(user_id, [])

    async def get_user_role(self, user_id):
        return self.roles.get(user_id, "user")

    async def list_owner_ids(self):
        return list(self.roles)

    async def list_documents(self, owner_id):
        if owner_id in self.failing_owners:
            raise ConnectionError(f"owner {owner_id} unavailable")
        return list(self.documents.get(owner_id, []))

    async def get_document(self, owner_id, document_id):
        return next((d for d in self.documents.get(owner_id, []) if d.id == document_id), None)

    async def add_document(self, owner_id, title, content):
        doc = VaultDocument(id=f"doc{next(self._ids)}", title=title, content=content,
                            owner_id=owner_id, created_at=datetime.utcnow())
        self.documents.setdefault(owner_id, []).append(doc)
        return doc

    async def delete_document(self, owner_id, document_id):
        docs = self.documents.get(owner_id, [])
        kept = [d for d in docs if d.id != document_id]
        self.documents[owner_id] = kept
        return len(kept) != len(docs)

    async def save_scan(self, user_id, text, result: PlagiarismResult, check_vault_only):
        if self.fail_saves:
            raise ConnectionError("write failed")
        scan_id = f"scan{next(self._ids)}"
        self.scans.append(ScanRecord(id=scan_id, user_id=user_id, text=text, result=result,
                                     check_vault_only=check_vault_only, created_at=datetime.utcnow()))
        return scan_id

    async def list_scans(self, user_id):
        return [s for s in reversed(self.scans) if s.user_id == user_id]

    async def delete_scan(self, user_id, scan_id):
        before = len(self.scans)
        self.scans = [s for s in self.scans if not (s.id == scan_id and s.user_id == user_id)]
        return len(self.scans) != before


class StubSearch:
    """Returns canned results per query and records what was asked."""

    def __init__(self, results=None, fail_on=()):
        self.results = results or {}
        self.fail_on = set(fail_on)
        self.queries: List[str] = []

    def __call__(self, query, settings):
        from app.utils.web_utils import SearchProviderError

        self.queries.append(query)
        if query in self.fail_on:
            raise SearchProviderError("boom")
        return [SearchItem(**item) for item in self.results.get(query, self.results.get("*", []))]


def make_token(user_id: str = "alice") -> str:
    return jwt.encode({"sub": user_id}, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


@pytest.fixture
def settings():
    return ScanSettings(search_api_key="key", search_engine_id="cx")


@pytest.fixture
def store():
    s = InMemoryVaultStore()
    s.add_user("alice")
    return s


@pytest.fixture
def search():
    return StubSearch()


@pytest.fixture
def client(store, search, settings):
    app.dependency_overrides[get_vault_store] = lambda: store
    app.dependency_overrides[get_scanner] = lambda: PlagiarismScanner(settings, search=search)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    return lambda user_id: {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def auth_headers(headers_for):
    return headers_for("alice")
