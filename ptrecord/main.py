import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import all models to ensure they're registered with SQLAlchemy Base
from . import models  # noqa: F401
from . import __version__
from .config import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD, ALLOWED_ORIGINS
from .database import Base, SessionLocal, engine
from .domain.accounts.router import members_router
from .domain.accounts.router import router as auth_router
from .domain.accounts.service import AccountService
from .domain.admin.router import router as admin_router
from .domain.comments.router import router as comments_router
from .domain.invites.router import router as invites_router
from .domain.scheduling.router import router as sessions_router
from .shared.exceptions import DomainError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def ensure_admin_account() -> None:
    """Create the bootstrap admin from ADMIN_EMAIL / ADMIN_PASSWORD when configured"""
    if not (ADMIN_EMAIL and ADMIN_PASSWORD):
        return

    db = SessionLocal()
    try:
        AccountService(db).ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
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
            raise

    ensure_admin_account()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="PT Record API", version=__version__, lifespan=lifespan)


def jsonable_errors(errors) -> list[dict]:
    # pydantic puts the raised ValueError in ctx, which is not JSON serializable
    return jsonable_encoder(
        [{key: value for key, value in error.items() if key in ("type", "loc", "msg", "input")} for error in errors]
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Render domain errors as detail plus a stable category"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.category}: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.status_code} {exc.category}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Keep FastAPI's 422 payload but tag it with the validation category"""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid input") if errors else "Invalid input"
    return JSONResponse(
        status_code=422,
        content={"detail": message, "category": "validation_error", "errors": jsonable_errors(errors)},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} - {response.status_code} ({elapsed_ms:.1f}ms)")
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(members_router)
app.include_router(invites_router)
app.include_router(sessions_router)
app.include_router(comments_router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {"message": "PT Record API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
