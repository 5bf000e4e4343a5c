# app/main.py
import asyncio
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from loguru import logger
from app.core.config import settings
from app.core.database import DatabaseManager
from app.core.logging import setup_logging
from app.core.middleware import RequestSizeLimitMiddleware
from app.api.routes import miners_router, user_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting up {settings.app_name} v{settings.version}...")

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    await DatabaseManager.init()

    try:
        yield
    finally:
        logger.info("Shutting down...")
        await DatabaseManager.close()

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    lifespan=lifespan,
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestSizeLimitMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

app.include_router(miners_router, prefix="/api/v1")

app.include_router(user_router, prefix="/api/v1", tags=["User"])


async def main():
    """ Main function to run FastAPI with uvicorn. """
    config = uvicorn.Config(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        reload=settings.debug
    )
    server = uvicorn.Server(config)
    await server.serve()

if __name__ == "__main__":
    asyncio.run(main())
