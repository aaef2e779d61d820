from __future__ import annotations

import logging

from fastapi import FastAPI

from src.api.cma import router as cma_router
from src.env_loader import load_env_file, log_level

load_env_file()
logging.basicConfig(level=log_level())

app = FastAPI(title="CMA Presentation Service")
app.include_router(cma_router)


@app.get("/health", tags=["meta"])
async def health() -> dict[str, str]:
    return {"status": "ok"}
