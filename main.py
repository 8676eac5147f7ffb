import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import api_router
from config.settings import API_HOST, API_PORT, APP_NAME, APP_VERSION, CORS_ORIGINS
from core.role_cache import WellKnownRoleCache
from core.skus import SKUValidationError
from database.connection import create_db_and_tables
from database.seed import seed_database
from utils.logger import get_logger

# Initialize logger
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - runs on startup and shutdown"""
    logger.info("Starting application...")
    create_db_and_tables()
    logger.info("Database tables created/verified")
    seed_database(app.routes)
    logger.info("Database seeded with roles and permissions")
    yield
    logger.info("Shutting down application...")


def _field_name(loc) -> str:
    # ("body", "variants", 0, "value") -> "variants.0.value"
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def format_validation_errors(errors: list[dict]) -> list[dict]:
    """Flatten pydantic errors into [{"field", "message"}]."""
    formatted = []
    for error in errors:
        ctx_error = (error.get("ctx") or {}).get("error")
        if isinstance(ctx_error, SKUValidationError):
            formatted.extend(field_error.to_dict() for field_error in ctx_error.errors)
            continue
        formatted.append({"field": _field_name(error.get("loc", ())), "message": error.get("msg", "")})
    return formatted


def create_app() -> FastAPI:
    app = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        description=f"{APP_NAME} Backend API",
        lifespan=lifespan,
    )

    # Ids of the built-in roles, looked up once per process
    app.state.role_cache = WellKnownRoleCache()

    # Include API routes
    app.include_router(api_router)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"message": "Validation failed.", "errors": format_validation_errors(exc.errors())},
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=API_HOST, port=API_PORT)
