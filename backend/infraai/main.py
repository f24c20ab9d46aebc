import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from infraai.config import get_settings
from infraai.database import CreditLedger
from infraai.routers import catalog, credits, design, health, webhooks
from infraai.services.catalog import get_catalog
from infraai.services.llm import LLMGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger.info("InfraAI starting up")

    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set - AI requests will fail!")
    if not settings.clerk_jwt_key:
        logger.warning("CLERK_JWT_KEY not set - authentication will not work!")

    app.state.catalog = get_catalog()
    app.state.ledger = CreditLedger(settings.credits_db_path, settings.default_credits)
    await app.state.ledger.init_db()
    app.state.gateway = LLMGateway(settings)

    yield

    await app.state.gateway.close()

    logger.info("InfraAI shutting down")


app = FastAPI(
    title="InfraAI API",
    description="AI-generated system architecture recommendations",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in get_settings().cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(credits.router)
app.include_router(design.router)
app.include_router(webhooks.router)
app.include_router(catalog.router)
