from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies.auth import get_current_user_id, get_vault_store
from app.schemas.plagiarism_schemas import vault_locator_parts
from app.schemas.report_schemas import VaultDocument, VaultDocumentCreate
from app.utils.vault_store import VaultStore

router = APIRouter(prefix="/vault", tags=["vault"])


@router.get("/documents", response_model=List[VaultDocument])
async def list_documents(
    user_id: str = Depends(get_current_user_id),
    store: VaultStore = Depends(get_vault_store),
):
    return await store.list_documents(user_id)


@router.post("/documents", response_model=VaultDocument, status_code=201)
async def add_document(
    body: VaultDocumentCreate,
    user_id: str = Depends(get_current_user_id),
    store: VaultStore = Depends(get_vault_store),
):
    return await store.add_document(user_id, body.title, body.content)


@router.delete("/documents/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
    store: VaultStore = Depends(get_vault_store),
):
    if not await store.delete_document(user_id, document_id):
        raise HTTPException(status_code=404, detail="Document not found")


@router.get("/resolve", response_model=VaultDocument)
async def resolve_locator(
    locator: str = Query(...),
    user_id: str = Depends(get_current_user_id),
    store: VaultStore = Depends(get_vault_store),
):
    """Look up the vault document behind an internal:// source locator."""
    parts = vault_locator_parts(locator)
    if parts is None:
        raise HTTPException(status_code=400, detail="Not a vault locator")
    owner_id, document_id = parts

    if owner_id != user_id and await store.get_user_role(user_id) != "admin":
        raise HTTPException(status_code=403, detail="Not allowed to open this document")

    doc = await store.get_document(owner_id, document_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc
