import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from switchboard_updater.api import routes
from switchboard_updater.services.factory import build_signer, build_submitter
from switchboard_updater.utils.config import Config
from switchboard_updater.utils.exceptions import SigningKeyError
from switchboard_updater.utils.log_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""

    # Startup
    setup_logging()
    logger.info("Switchboard updater starting...")

    # Validate config
    Config.validate()

    # Without key material the API still serves reads; submissions fail
    try:
        signer = build_signer()
    except SigningKeyError as e:
        logger.warning(f"No signer available, submissions disabled: {e}")
        signer = None

    # Inject into routes
    routes.submitter = build_submitter(signer=signer)

    logger.info("FastAPI server started")

    yield

    # Shutdown
    logger.info("Shutting down...")

# Create FastAPI app
app = FastAPI(
    title="Switchboard Oracle Updater",
    description="Fetch signed oracle updates from Crossbar and submit them on-chain",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(routes.router, prefix="/api", tags=["oracle"])

@app.get("/")
async def root():
    return {
        "message": "Switchboard Oracle Updater",
        "docs": "/docs",
        "health": "/api/health"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
