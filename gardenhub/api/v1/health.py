# 📄 File: gardenhub/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# Lets the hosting platform ask "is the garden hub up, and can it reach its database?"
# 🧪 Purpose (Technical Summary):
# Liveness and readiness endpoints; readiness runs the Supabase health check
# and reports forecast client statistics.
# 🔗 Dependencies:
# FastAPI, gardenhub.shared.config.supabase, gardenhub.shared.config.settings
# 🔄 Connected Modules / Calls From:
# gardenhub.api.v1.router, load balancers

from datetime import datetime

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from gardenhub.modules.weather.infrastructure.open_meteo_client import get_weather_client
from gardenhub.shared.config.settings import get_settings
from gardenhub.shared.config.supabase import get_supabase_manager

health_router = APIRouter()


@health_router.get("/health", summary="Basic Health Check")
async def health_check() -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "service": "gardenhub-api",
            "version": get_settings().APP_VERSION,
        },
    )


@health_router.get("/health/live", summary="Liveness Probe")
async def liveness_probe() -> Response:
    return Response(status_code=200)


@health_router.get("/health/ready", summary="Readiness Probe")
async def readiness_probe() -> JSONResponse:
    """Ready only when Supabase answers a trivial query."""
    supabase_status = await get_supabase_manager().health_check()
    ready = supabase_status["database_service"]
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.now().isoformat(),
            "checks": {
                "supabase": supabase_status,
                "weather_api": get_weather_client().get_stats(),
            },
        },
    )
