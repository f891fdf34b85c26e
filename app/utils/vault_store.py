"""
MongoDB-backed document vault and scan history.

Collections:
  users      {_id, role}   _id is the token subject, as a string or an ObjectId
  documents  {ownerId, title, content, createdAt}
  scans      {userId, text, result, checkVaultOnly, createdAt}
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.schemas.plagiarism_schemas import PlagiarismResult
from app.schemas.report_schemas import VaultDocument, ScanRecord

logger = logging.getLogger("scanner.vault")


def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class VaultStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    # ---- users ----
    async def get_user_role(self, user_id: str) -> str:
        # users._id may be the token subject string or an ObjectId
        ids = [user_id]
        oid = _object_id(user_id)
        if oid is not None:
            ids.append(oid)
        user = await self.db.users.find_one({"_id": {"$in": ids}}, {"role": 1})
        return (user or {}).get("role", "user")

    async def list_owner_ids(self) -> List[str]:
        cursor = self.db.users.find({}, {"_id": 1})
        return [str(u["_id"]) async for u in cursor]

    # ---- documents ----
    async def list_documents(self, owner_id: str) -> List[VaultDocument]:
        cursor = self.db.documents.find({"ownerId": owner_id})
        docs = []
        async for d in cursor:
            docs.append(VaultDocument(
                id=str(d["_id"]),
                title=d.get("title", ""),
                content=d.get("content", ""),
                owner_id=owner_id,
                created_at=d.get("createdAt"),
            ))
        return docs

    async def get_document(self, owner_id: str, document_id: str) -> Optional[VaultDocument]:
        oid = _object_id(document_id)
        if oid is None:
            return None
        d = await self.db.documents.find_one({"_id": oid, "ownerId": owner_id})
        if d is None:
            return None
        return VaultDocument(id=document_id, title=d.get("title", ""), content=d.get("content", ""),
                             owner_id=owner_id, created_at=d.get("createdAt"))

    async def add_document(self, owner_id: str, title: str, content: str) -> VaultDocument:
        created = datetime.utcnow()
        res = await self.db.documents.insert_one({
            "ownerId": owner_id,
            "title": title,
            "content": content,
            "createdAt": created,
        })
        return VaultDocument(id=str(res.inserted_id), title=title, content=content,
                             owner_id=owner_id, created_at=created)

    async def delete_document(self, owner_id: str, document_id: str) -> bool:
        oid = _object_id(document_id)
        if oid is None:
            return False
        res = await self.db.documents.delete_one({"_id": oid, "ownerId": owner_id})
        return res.deleted_count == 1

    # ---- scans ----
    async def save_scan(self, user_id: str, text: str, result: PlagiarismResult,
                        check_vault_only: bool) -> str:
        res = await self.db.scans.insert_one({
            "userId": user_id,
            "text": text,
            "result": result.model_dump(),
            "checkVaultOnly": check_vault_only,
            "createdAt": datetime.utcnow(),
        })
        return str(res.inserted_id)

    async def list_scans(self, user_id: str) -> List[ScanRecord]:
        cursor = self.db.scans.find({"userId": user_id}).sort("createdAt", -1)
        return [
            ScanRecord(
                id=str(s["_id"]),
                user_id=user_id,
                text=s.get("text", ""),
                result=PlagiarismResult(**s["result"]),
                check_vault_only=s.get("checkVaultOnly", False),
                created_at=s["createdAt"],
            )
            async for s in cursor
        ]

    async def delete_scan(self, user_id: str, scan_id: str) -> bool:
        oid = _object_id(scan_id)
        if oid is None:
            return False
        res = await self.db.scans.delete_one({"_id": oid, "userId": user_id})
        return res.deleted_count == 1


async def fetch_vault_documents(store, user_id: str) -> List[VaultDocument]:
    """
    Documents a user's scan is checked against: their own vault, or every
    user's vault for admins. Owners are fetched concurrently and an owner
    whose fetch fails contributes nothing.
    """
    try:
        role = await store.get_user_role(user_id)
        owners = await store.list_owner_ids() if role == "admin" else [user_id]
    except Exception as e:
        logger.warning(f"Vault access limited for this scan: {e}")
        return []

    async def _fetch_one(owner_id: str) -> List[VaultDocument]:
        try:
            return await store.list_documents(owner_id)
        except Exception as e:
            logger.warning(f"Vault fetch failed for owner {owner_id}: {e}")
            return []

    batches = await asyncio.gather(*(_fetch_one(o) for o in owners))
    return [doc for batch in batches for doc in batch]
