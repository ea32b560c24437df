import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.routers import analyze, reports
from app.services import heuristics

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the heuristic rule table on startup so a bad rules file fails fast."""
    rules = heuristics.get_rules()
    logger.info("Startup complete, %d heuristic rules loaded.", len(rules))
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is not set; every run will use pattern-based scoring.")
    yield
    logger.info("Shutting down.")


app = FastAPI(
    title="Fake Review Detector",
    description=(
        "Classifies product reviews as fake or genuine with Claude, "
        "falling back to pattern-based scoring, and reports a trust score."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyze.router)
app.include_router(reports.router)


@app.get("/health", tags=["health"])
async def health_check():
    return {"status": "ok", "version": "1.0.0"}
