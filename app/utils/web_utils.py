from typing import Callable, List
import logging
from concurrent.futures import ThreadPoolExecutor

import requests
from requests.adapters import HTTPAdapter
from pydantic import ValidationError

from app.config import GOOGLE_ENDPOINT, TAVILY_ENDPOINT, MAX_SEARCH_WORKERS, ScanSettings
from app.schemas.sources_schemas import SearchItem

logger = logging.getLogger("scanner.web")

SearchFn = Callable[[str, ScanSettings], List[SearchItem]]


class SearchProviderError(Exception):
    """A single search request failed: network, HTTP status or unreadable payload."""


# ---- Session ----
def _make_session() -> requests.Session:
    s = requests.Session()
    # No retries: a failed query just contributes nothing.
    s.mount("https://", HTTPAdapter(max_retries=0, pool_connections=10, pool_maxsize=10))
    s.mount("http://", HTTPAdapter(max_retries=0, pool_connections=10, pool_maxsize=10))
    s.headers.update({
        "User-Agent": "vaultscan/1.0",
        "Accept": "application/json",
    })
    return s

_SESSION = _make_session()


# ---- Providers ----
def google_search(query: str, settings: ScanSettings) -> List[SearchItem]:
    params = {
        "key": settings.search_api_key,
        "cx": settings.search_engine_id,
        "q": query,
        "num": min(settings.results_per_query, 10),
    }
    try:
        r = _SESSION.get(settings.search_endpoint or GOOGLE_ENDPOINT, params=params,
                         timeout=settings.request_timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        raise SearchProviderError(f"google search failed for '{query[:60]}': {e}") from e
    if not isinstance(data, dict):
        raise SearchProviderError(f"google search returned an unexpected payload for '{query[:60]}'")

    items = data.get("items", []) or []
    if not isinstance(items, list):
        raise SearchProviderError(f"google search returned malformed items for '{query[:60]}'")
    return _decode(items, SearchItem.from_google)


def tavily_search(query: str, settings: ScanSettings) -> List[SearchItem]:
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.search_api_key}",
    }
    body = {"query": query, "max_results": settings.results_per_query}
    try:
        r = _SESSION.post(settings.search_endpoint or TAVILY_ENDPOINT, json=body, headers=headers,
                          timeout=settings.request_timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        raise SearchProviderError(f"tavily search failed for '{query[:60]}': {e}") from e
    if not isinstance(data, dict):
        raise SearchProviderError(f"tavily search returned an unexpected payload for '{query[:60]}'")

    items = data.get("results", []) or []
    if not isinstance(items, list):
        raise SearchProviderError(f"tavily search returned malformed results for '{query[:60]}'")
    return _decode(items, SearchItem.from_tavily)


def _decode(items: list, build: Callable[[dict], SearchItem]) -> List[SearchItem]:
    out: List[SearchItem] = []
    for item in items:
        try:
            out.append(build(item))
        except (KeyError, TypeError, AttributeError, ValidationError):
            logger.debug(f"Skipping malformed search item: {item!r}")
    return out


PROVIDERS = {
    "google": google_search,
    "tavily": tavily_search,
}


def search_web(query: str, settings: ScanSettings) -> List[SearchItem]:
    try:
        provider = PROVIDERS[settings.search_provider]
    except KeyError:
        raise SearchProviderError(f"Unknown search provider: {settings.search_provider}")
    items = provider(query, settings)
    logger.info(f"{settings.search_provider}: got {len(items)} items for '{query[:60]}'")
    return items


# ---- Multi-query fetch ----
def fetch_search_results(queries: List[str], settings: ScanSettings,
                         search: SearchFn = search_web) -> List[List[SearchItem]]:
    """
    Run every query concurrently. Each query yields its own list; a query
    that fails yields an empty list and the others carry on.
    """
    if not queries:
        return []

    def _run(q: str) -> List[SearchItem]:
        try:
            return search(q, settings)
        except Exception as e:
            logger.warning(f"Search batch failed for '{q[:60]}', continuing: {e}")
            return []

    with ThreadPoolExecutor(max_workers=min(MAX_SEARCH_WORKERS, len(queries))) as ex:
        return list(ex.map(_run, queries))
