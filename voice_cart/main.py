# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv
load_dotenv()

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from .config import CORS_ORIGINS
from . import db
from .logging_config import request_id_var, setup_logging
from .routes import catalog_router, limiter, list_router, voice_router

# Configure logging at module load time
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tables are created on startup; there are no migrations
    db.init_db()
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Voice Cart API",
    description="Bilingual (English/Hindi) voice shopping list",
    version="1.0.0",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Voice", "description": "Transcription and voice commands"},
        {"name": "Shopping List", "description": "Shopping list, history and suggestions"},
        {"name": "Catalog", "description": "Inventory search and category browsing"},
    ],
)


# ---------- Request ID Middleware ----------
class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each request.
    The ID is available in request.state.request_id, stamped on log records
    emitted while the request is served, and returned in X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIDMiddleware)

# ---------- Rate Limiting ----------
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ---------- CORS ----------
# "*" cannot be combined with credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok"}


app.include_router(voice_router)
app.include_router(list_router)
app.include_router(catalog_router)

logger.info("Voice Cart API ready (CORS origins: %s)", ", ".join(CORS_ORIGINS))
