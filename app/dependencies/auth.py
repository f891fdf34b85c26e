# app/dependencies/auth.py

from functools import lru_cache

from jose import JWTError, jwt
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorClient

from app.config import MONGODB_URI, MONGODB_DB, JWT_SECRET_KEY, JWT_ALGORITHM, ScanSettings
from app.utils.plagiarism_scanner import PlagiarismScanner
from app.utils.vault_store import VaultStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def verify_token(token: str = Depends(oauth2_scheme)) -> dict:
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token payload")
    return payload


def get_current_user_id(payload: dict = Depends(verify_token)) -> str:
    return str(payload["sub"])


@lru_cache
def get_mongo_client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(MONGODB_URI)


def get_vault_store(client: AsyncIOMotorClient = Depends(get_mongo_client)) -> VaultStore:
    return VaultStore(client[MONGODB_DB])


@lru_cache
def get_scanner() -> PlagiarismScanner:
    return PlagiarismScanner(ScanSettings.from_env())
