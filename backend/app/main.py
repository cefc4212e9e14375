import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from app.api import pricing, quotes
from app.db.session import get_engine

logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:80").split(",")
    if o.strip()
]

app = FastAPI(title="Print Pricing Service")

# CORS for the design tool frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
app.include_router(quotes.router, prefix="/quotes", tags=["quotes"])


@app.on_event("startup")
def on_startup():
    # fail fast on an incomplete pricing table
    engine = pricing.get_price_engine()
    logger.info("Pricing config loaded for methods=%s",
                [m.value for m in engine.config.methods])

    SQLModel.metadata.create_all(get_engine())


@app.get("/")
async def root():
    return {"status": "ok", "service": "print-pricing"}
