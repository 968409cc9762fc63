# metadata_api/main.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from metadata_api.api import routers
from metadata_api.core.config import get_settings
from metadata_api.core.logging import configure_logging

# === Settings & logging ===
settings = get_settings()
logger = configure_logging()

app = FastAPI(title=settings.app_name, version=settings.app_version)

# === CORS ===
allow_origins = [origin.strip() for origin in settings.allow_origins if origin.strip()] or ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],  # download filename
)


# === Error bodies: {"error": "..."} ===
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
    )
    return JSONResponse(status_code=422, content={"error": problems or "Invalid request"})


# === Routers ===
for router in routers:
    app.include_router(router)


# === Basic endpoints ===
@app.get("/health")
async def health_check() -> dict:
    logger.debug("Health check invoked")
    return {"status": "OK", "service": settings.app_name}


def run() -> None:
    import uvicorn

    logger.info("%s running on port %s", settings.app_name, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
