import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from . import models  # noqa: F401 - registers tables on Base
from .access import RouteKind, classify_route, sign_in_redirect
from .auth import resolve_request_context
from .config import ALLOWED_ORIGINS, ENVIRONMENT
from .database import Base, engine
from .routes.calendar import router as calendar_router
from .routes.pwa import router as pwa_router
from .routes.rpc import router as rpc_router
from .routes.sections import router as sections_router
from .routes.upload import router as upload_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application starting up ({ENVIRONMENT})...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Front Desk API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": exc.errors()})


@app.middleware("http")
async def auth_gate(request: Request, call_next):
    """
    Resolve the caller once per request and keep signed-out callers off protected paths.
    Public paths win over protected ones so email response links keep working.
    """
    context = await resolve_request_context(request)
    request.state.context = context

    path = request.url.path
    if classify_route(path) == RouteKind.PROTECTED and not context.is_authenticated:
        logger.info(f"🔄 Redirecting signed-out request for {path} to sign-in")
        return RedirectResponse(sign_in_redirect(str(request.url)), status_code=307)

    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} failed: {str(e)}")
        raise
    duration = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration:.0f}ms)")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rpc_router)
app.include_router(calendar_router)
app.include_router(upload_router)
app.include_router(pwa_router)
# Section catch-alls go last
app.include_router(sections_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
