from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shortlinks.core.config import settings
from shortlinks.core.errors import ConflictError, NotFoundError, StorageError, ValidationError
from shortlinks.core.logging_config import configure_logging
from shortlinks.db.Connection import database
from shortlinks.db.Models import models
from shortlinks.api import links, redirect

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database models initialized/checked.")
    database.verify_database_connection()
    database.verify_redis_connection()
    yield
    logger.info("Shutting down gracefully...")
    try:
        database.engine.dispose()
    except Exception:
        logger.debug("Error disposing DB engine")
    if database.redis_client is not None:
        try:
            database.redis_client.close()
        except Exception:
            logger.debug("Error closing Redis client")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Link shortener: owner-managed short codes and public redirects",
    lifespan=lifespan,
)


@app.get("/health", tags=["health"])
def health_check():
    return {"status": "healthy", "service": "link-shortener"}


# Route table: API first, the catch-all redirect last.
app.include_router(links.router, prefix="/api/v1")
app.include_router(redirect.router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field_errors": exc.field_errors},
    )


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    # Already logged with its traceback by the registry
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
