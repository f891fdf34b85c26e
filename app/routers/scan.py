import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from app.dependencies.auth import get_current_user_id, get_scanner, get_vault_store
from app.schemas.plagiarism_schemas import ScanRequest, PlagiarismResult
from app.schemas.report_schemas import ScanRecord
from app.utils.plagiarism_scanner import PlagiarismScanner
from app.utils.vault_store import VaultStore, fetch_vault_documents

logger = logging.getLogger("scanner.api")

router = APIRouter(tags=["scan"])


@router.post("/scan", response_model=PlagiarismResult)
async def scan_text(
    body: ScanRequest,
    user_id: str = Depends(get_current_user_id),
    store: VaultStore = Depends(get_vault_store),
    scanner: PlagiarismScanner = Depends(get_scanner),
):
    if not body.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    if not body.check_vault and not body.search_web:
        raise HTTPException(status_code=400, detail="Select the vault, the web, or both")

    vault_docs = await fetch_vault_documents(store, user_id) if body.check_vault else []

    try:
        result = await run_in_threadpool(scanner.scan, body.text, vault_docs, body.search_web)
    except Exception:
        logger.exception("Scan failed")
        raise HTTPException(status_code=500, detail="Analysis encountered an error.")

    try:
        await store.save_scan(user_id, body.text, result,
                              check_vault_only=body.check_vault and not body.search_web)
    except Exception as e:
        logger.warning(f"Failed to record scan history: {e}")

    return result


@router.get("/scans", response_model=List[ScanRecord])
async def list_scans(
    user_id: str = Depends(get_current_user_id),
    store: VaultStore = Depends(get_vault_store),
):
    return await store.list_scans(user_id)


@router.delete("/scans/{scan_id}", status_code=204)
async def delete_scan(
    scan_id: str,
    user_id: str = Depends(get_current_user_id),
    store: VaultStore = Depends(get_vault_store),
):
    if not await store.delete_scan(user_id, scan_id):
        raise HTTPException(status_code=404, detail="Scan not found")
