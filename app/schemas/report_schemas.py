from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.schemas.plagiarism_schemas import PlagiarismResult


class VaultDocument(BaseModel):
    id: str                 # MongoDB ObjectId as string
    title: str
    content: str
    owner_id: str
    created_at: Optional[datetime] = None


class VaultDocumentCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


class ScanRecord(BaseModel):
    id: str
    user_id: str
    text: str
    result: PlagiarismResult
    check_vault_only: bool
    created_at: datetime
