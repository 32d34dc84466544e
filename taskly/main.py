import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS, LOG_DIR, LOG_LEVEL, SEED_DEMO_DATA
from .database import create_tables, session_scope
from .errors import ErrorKind, TasklyError
from .logging_setup import setup_logging
from .routers import auth, tasks

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_REGISTRATION: status.HTTP_409_CONFLICT,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(kind: ErrorKind, message: str, fields=None) -> JSONResponse:
    body = {"kind": kind.value, "message": message}
    if fields is not None:
        body["fields"] = fields
    headers = None
    if STATUS_BY_KIND[kind] == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content=jsonable_encoder({"error": body}),
        headers=headers,
    )


# Create FastAPI app
app = FastAPI(
    title="Taskly API",
    description="Multi-user task management API with JWT authentication",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TasklyError)
async def taskly_error_handler(request: Request, exc: TasklyError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
    return error_response(exc.kind, exc.message, exc.details())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = {}
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" segment.
        loc = [str(part) for part in err.get("loc", ())][1:]
        fields.setdefault(".".join(loc) or "request", err.get("msg", "Invalid value"))
    return error_response(ErrorKind.VALIDATION_FAILED, "; ".join(fields.values()), fields)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(ErrorKind.UNEXPECTED, TasklyError.default_message)


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])


# Configure logging, create tables and optionally seed on startup
@app.on_event("startup")
def on_startup():
    setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR)
    create_tables()
    if SEED_DEMO_DATA:
        from .seed import seed_demo_data

        with session_scope() as db:
            seed_demo_data(db, auth.get_password_hasher())


@app.get("/")
def read_root():
    return {"message": "Taskly API"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
