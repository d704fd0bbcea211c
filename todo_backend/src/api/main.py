from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import create_db_engine, init_schema
from .errors import PersistenceError, TodoNotFoundError
from .logger import get_logger
from .settings import get_settings
from .routers import todos as todos_router

logger = get_logger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service liveness endpoint."},
    {
        "name": "todos",
        "description": "Create, list, replace and delete Todo items.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The pool lives for the whole process and is shared by every request
    settings = get_settings()
    engine = create_db_engine(settings)
    init_schema(engine)
    app.state.engine = engine
    logger.info("Todo Server started")
    try:
        yield
    finally:
        engine.dispose()
        logger.info("Database connections released")


app = FastAPI(
    title="Todo Server",
    description="REST backend exposing CRUD operations over a single todo table.",
    version="1.0.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

_settings = get_settings()

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return 400 with a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "Description is required" | "Request validation failed",
            "detail": [{"loc": [...], "msg": "...", "type": "..."}, ...]
        }
    """
    detail = _error_details(exc)
    about_description = any(
        "description" in err["loc"] or (err["loc"] == ["body"] and err["type"] == "missing")
        for err in detail
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": "Description is required" if about_description else "Request validation failed",
            "detail": detail,
        },
    )


@app.exception_handler(TodoNotFoundError)
async def not_found_exception_handler(request: Request, exc: TodoNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Todo not found"})


@app.exception_handler(PersistenceError)
async def persistence_exception_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """
    Infrastructure failures are logged with their cause and reported to the
    caller as an opaque server error.
    """
    logger.error("%s %s failed: %r", request.method, request.url.path, exc.__cause__ or exc)
    return JSONResponse(status_code=500, content={"error": "Server Error"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Liveness", tags=["health"], response_class=PlainTextResponse)
def health_check() -> str:
    """
    Liveness endpoint.

    Returns:
        The plain text string 'Todo Server'.
    """
    return "Todo Server"


# Include routers
app.include_router(todos_router.router)


# PUBLIC_INTERFACE
def serve() -> None:
    """Run the application under uvicorn on HOST:PORT."""
    import uvicorn

    settings = get_settings()
    logger.info("Server is running on : %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
