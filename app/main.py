from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.logger import logger
from app.routers.scan import router as scan_router
from app.routers.compare import router as compare_router
from app.routers.vault import router as vault_router

app = FastAPI(title="vaultscan")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scan_router)
app.include_router(compare_router)
app.include_router(vault_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


logger.info("vaultscan API ready")
