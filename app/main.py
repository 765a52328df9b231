from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.responses import JSONResponse

import app.db.base  # noqa: F401
from app.api.main import api_router
from app.core.logging import configure_logging, get_logger
from app.core.settings import settings
from app.middlewares.telemetry import RequestContextMiddleware
from app.services.errors import (
    InactiveServiceError,
    NotFoundError,
    ScheduleDataError,
)
from app.version import APP_VERSION, BUILD_TIME_UTC, GIT_SHA

configure_logging(json=settings.LOG_JSON, level=settings.LOG_LEVEL)

app = FastAPI(debug=settings.DEBUG, title="Barbería - Agenda")

# --- Middlewares de contexto/log
app.add_middleware(RequestContextMiddleware)

# --- CORS
allowed_origins = []
for host in settings.ALLOWED_HOSTS.split(","):
    _host = host.strip()
    if not _host:
        continue
    # acepta con o sin protocolo
    if _host.startswith("http"):
        allowed_origins.append(_host)
    else:
        allowed_origins.append(f"http://{_host}")
        allowed_origins.append(f"https://{_host}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["*"] if settings.DEBUG else allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- HTTPS only en prod
if settings.APP_ENV.value == "prod":
    app.add_middleware(HTTPSRedirectMiddleware)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)

    if settings.APP_ENV.value == "prod":
        response.headers["Strict-Transport-Security"] = (
            "max-age=15552000; includeSubDomains; preload"
        )

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


app.include_router(api_router)


# --- Errores del llamador (antes de entrar al núcleo de agenda)
@app.exception_handler(NotFoundError)
async def not_found_error(_: Request, exc: NotFoundError):
    return JSONResponse({"detail": str(exc)}, status_code=404)


@app.exception_handler(InactiveServiceError)
async def inactive_service_error(_: Request, exc: InactiveServiceError):
    return JSONResponse({"detail": str(exc)}, status_code=400)


@app.exception_handler(ScheduleDataError)
async def schedule_data_error(_: Request, exc: ScheduleDataError):
    get_logger().error("schedule.corrupt", error=str(exc))
    return JSONResponse(
        {"detail": "Horario del barbero inválido"}, status_code=500
    )


# --- Endpoints
@app.get("/healthz", tags=["ops"])
def healthz():
    get_logger().info("health.check")
    return {"status": "ok", "env": settings.APP_ENV, "version": APP_VERSION}


@app.get("/version", tags=["ops"])
def version():
    return {
        "version": APP_VERSION,
        "git_sha": GIT_SHA,
        "build_time_utc": BUILD_TIME_UTC,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
    }
