from fastapi import FastAPI, Request, HTTPException, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from dotenv import load_dotenv
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import os
import logging

from app.database import get_db, Base
from app import models  # noqa: F401  registers tables on Base.metadata
from app.routes import auth, movies, reviews, watchlist
from app.middleware.security import SecurityHeadersMiddleware
from app.services.omdb_service import OMDBService
from app.utils.env_validation import validate_environment, get_environment

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# ============================================
# Application Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: check configuration (aborts on unsafe production settings)
    Shutdown: log only
    """
    logger.info("=" * 60)
    logger.info("Movie Database API starting")
    logger.info(f"   Environment: {get_environment()}")
    logger.info(f"   CORS Origins: {len(allowed_origins)} configured")
    logger.info(f"   OMDb: {'configured' if OMDBService.is_configured() else 'not configured'}")
    logger.info("=" * 60)

    validate_environment()

    yield

    logger.info("Movie Database API shutting down")


app = FastAPI(
    title="Movie Database API",
    description="Movie catalog combining OMDb with custom movies, reviews and watchlists",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ============================================
# Security Configuration
# ============================================

# CORS - Whitelist allowed origins
allowed_origins = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",
]
if production_url := os.getenv("FRONTEND_URL"):
    allowed_origins.append(production_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(SecurityHeadersMiddleware, enable_hsts=get_environment() == "production")

# Trusted Hosts - Production only
if get_environment() == "production":
    if trusted_hosts := [h.strip() for h in os.getenv("TRUSTED_HOSTS", "").split(",") if h.strip()]:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)


# ============================================
# Exception Handlers - keep CORS headers on error responses
# ============================================

def _with_cors(request: Request, response: JSONResponse) -> JSONResponse:
    origin = request.headers.get("origin")
    if origin in allowed_origins:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    response = JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )
    return _with_cors(request, response)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed body, query or path parameters answer 400 with field locations"""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg"),
        }
        for error in exc.errors()
    ]
    response = JSONResponse(
        status_code=400,
        content=jsonable_encoder({"error": "Validation failed", "details": details})
    )
    return _with_cors(request, response)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    response = JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )
    return _with_cors(request, response)


# ============================================
# Routes
# ============================================

@app.get("/", tags=["Health"])
async def root():
    """Basic health check"""
    return {
        "message": "Movie Database API",
        "version": API_VERSION,
        "status": "healthy",
        "docs": "/docs"
    }


@app.get("/api/health", tags=["Health"])
def health_check(db: Session = Depends(get_db)):
    """Database reachability, table presence and OMDb configuration"""
    database = {"connected": False, "missing_tables": []}
    try:
        db.execute(text("SELECT 1"))
        database["connected"] = True
        existing = set(inspect(db.get_bind()).get_table_names())
        database["missing_tables"] = sorted(set(Base.metadata.tables) - existing)
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {str(e)}")

    healthy = database["connected"] and not database["missing_tables"]
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "degraded",
            "api_version": API_VERSION,
            "environment": get_environment(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": database,
            "omdb": {"configured": OMDBService.is_configured()},
        }
    )


app.include_router(auth.router)
app.include_router(movies.router)
app.include_router(reviews.router)
app.include_router(watchlist.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
