from fastapi import APIRouter, Depends, HTTPException

from app.dependencies.auth import get_current_user_id, get_scanner
from app.schemas.plagiarism_schemas import CompareRequest, ComparisonResult
from app.utils.plagiarism_scanner import PlagiarismScanner

router = APIRouter(tags=["compare"])


@router.post("/compare", response_model=ComparisonResult)
async def compare_texts(
    body: CompareRequest,
    user_id: str = Depends(get_current_user_id),
    scanner: PlagiarismScanner = Depends(get_scanner),
):
    if not body.text_a.strip() or not body.text_b.strip():
        raise HTTPException(status_code=400, detail="Both texts are required")
    return scanner.compare(body.text_a, body.text_b)
