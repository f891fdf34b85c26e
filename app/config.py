import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

# ───── Storage & auth ─────
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/vaultscan")
MONGODB_DB = os.getenv("MONGODB_DB", "vaultscan")
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# ───── Web search ─────
SEARCH_PROVIDER = os.getenv("SEARCH_PROVIDER", "google")  # "google" | "tavily"
SEARCH_API_KEY = os.getenv("SEARCH_API_KEY", "")
SEARCH_ENGINE_ID = os.getenv("SEARCH_ENGINE_ID", "")
SEARCH_ENDPOINT = os.getenv("SEARCH_ENDPOINT", "")
GOOGLE_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
TAVILY_ENDPOINT = "https://api.tavily.com/search"
RESULTS_PER_QUERY = 10
REQUEST_TIMEOUT = 6
MAX_SEARCH_WORKERS = 2

# ───── Similarity thresholds ─────
MIN_SCAN_LENGTH = 20
VAULT_MIN_SCORE = 5          # vault matches at or below this are noise
WEB_MIN_SCORE = 15           # web matches below this are dropped
HIGH_SIMILARITY_SCORE = 60   # scan summary band
COMPARE_HIGH_SCORE = 50      # comparison summary band

# ───── Similarity formula ─────
MIN_WORD_LENGTH = 3
PHRASE_LENGTH = 4
MAX_PHRASE_SAMPLES = 15
JACCARD_WEIGHT = 0.3
SEQUENCE_WEIGHT = 0.7
SCORE_SCALE = 2.5

# ───── Queries & highlighting ─────
QUERY_MIN_WORD_LENGTH = 4
QUERY_WORDS = 8
SECOND_QUERY_MIN_WORDS = 30
HIGHLIGHT_WINDOW = 3
SCAN_MARK_OPEN = '<mark class="match-highlight">'
COMPARE_MARK_OPEN = '<mark class="overlap-highlight">'
MARK_CLOSE = "</mark>"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "scanner.log")


class SimilarityThresholds(BaseModel):
    """Score bands used when filtering candidates and writing summaries."""

    min_scan_length: int = Field(default=MIN_SCAN_LENGTH, ge=0)
    vault_min_score: int = Field(default=VAULT_MIN_SCORE, ge=0, le=100)
    web_min_score: int = Field(default=WEB_MIN_SCORE, ge=0, le=100)
    high_similarity_score: int = Field(default=HIGH_SIMILARITY_SCORE, ge=0, le=100)
    compare_high_score: int = Field(default=COMPARE_HIGH_SCORE, ge=0, le=100)


class ScanSettings(BaseModel):
    """Everything a scanner needs from the environment, passed in at construction."""

    search_provider: str = "google"
    search_api_key: str = ""
    search_engine_id: str = ""
    search_endpoint: Optional[str] = None
    results_per_query: int = Field(default=RESULTS_PER_QUERY, ge=1)
    request_timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)
    thresholds: SimilarityThresholds = Field(default_factory=SimilarityThresholds)

    @property
    def search_enabled(self) -> bool:
        if not self.search_api_key:
            return False
        if self.search_provider == "google":
            return bool(self.search_engine_id)
        return True

    @classmethod
    def from_env(cls) -> "ScanSettings":
        return cls(
            search_provider=SEARCH_PROVIDER,
            search_api_key=SEARCH_API_KEY,
            search_engine_id=SEARCH_ENGINE_ID,
            search_endpoint=SEARCH_ENDPOINT or None,
        )
