# --- imports (top of triagex/app.py) ---
import os
import json
import time
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

# Load env vars before importing modules that read them at import time
BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(ENV_PATH)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from triagex.models import init_db
from triagex.db.session import SessionLocal
from triagex.auth.deps import hash_password
from triagex.models.user import User
from triagex.middleware.tracing import TracingMiddleware, TRACE_ID_CTX_VAR
from triagex.routes import auth_routes, triage_routes
from triagex.utils.exceptions import (
    TriageError,
    error_body,
    handle_http_exception,
    handle_triage_error,
    handle_unhandled_exception,
    handle_validation_error,
)
from triagex.utils.rate_limit import limiter

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"
CORS_ORIGINS = [
    o.strip()
    for o in (os.getenv("CORS_ORIGINS") or DEFAULT_CORS_ORIGINS).split(",")
    if o.strip()
]
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()


# --- logging setup ---
class JsonFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "function": record.funcName,
            "message": record.msg if isinstance(record.msg, dict) else record.getMessage(),
            "trace_id": TRACE_ID_CTX_VAR.get() or None,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging() -> logging.Logger:
    logger = logging.getLogger("triagex")
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    return logger


logger = configure_logging()

# --- app & middleware ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    _maybe_seed_demo_user()
    yield


app = FastAPI(title="TriageX Backend", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter

app.add_middleware(TracingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(TriageError, handle_triage_error)
app.add_exception_handler(StarletteHTTPException, handle_http_exception)
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(Exception, handle_unhandled_exception)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    try:
        retry_after = max(1, int(getattr(exc, "reset_time", time.time()) - time.time()))
    except (TypeError, ValueError):
        retry_after = 60
    logger.info({
        "function": "rate_limit",
        "path": str(request.url.path),
        "client": get_remote_address(request),
    })
    return JSONResponse(
        status_code=429,
        headers={"Retry-After": str(retry_after)},
        content=error_body(429, "Too many requests. Please wait a bit and try again."),
    )


def _maybe_seed_demo_user() -> None:
    email = (os.getenv("DEMO_USER_EMAIL") or "").strip().lower()
    password = os.getenv("DEMO_USER_PASSWORD") or ""
    name = (os.getenv("DEMO_USER_NAME", "Demo User") or "").strip()

    if not email or not password:
        return

    try:
        with SessionLocal() as db:
            exists = db.query(User).filter(User.email == email).first()
            if exists:
                return
            db.add(User(email=email, hashed_password=hash_password(password), name=name))
            db.commit()
    except Exception:
        # Seeding is best-effort; never block startup
        logger.warning("Demo user seeding failed", exc_info=True)


@app.get("/", tags=["health"])
def health():
    return {"message": "TriageX Backend API is running!"}


app.include_router(auth_routes.router)
app.include_router(triage_routes.router)
