# 📄 File: gardenhub/main.py
#
# 🧭 Purpose (Layman Explanation):
# The front door of the community garden hub: starts the service, plugs in the task board,
# plots, events, rules, messages, weather and profiles, and makes sure it shuts down cleanly.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: lifespan (logging, Supabase client, weather
# client), middleware stack, repository bindings via dependency_overrides, the domain
# exception handler and router registration.
#
# 🔗 Dependencies:
# - FastAPI, uvicorn
# - gardenhub.shared.config.settings, gardenhub.shared.config.supabase
# - All module routers and their Supabase repositories
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - tests (create_application / app)

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from gardenhub.api.middleware.error_handling import ErrorHandlingMiddleware
from gardenhub.api.middleware.logging import RequestLoggingMiddleware
from gardenhub.api.v1.router import api_v1_router
from gardenhub.shared.config.settings import get_settings
from gardenhub.shared.config.supabase import cleanup_supabase, get_supabase_manager
from gardenhub.shared.core.exceptions import GardenHubException
from gardenhub.shared.utils.logging import (
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

# Blueprints (repository interfaces) and the Supabase implementations bound to them
from gardenhub.modules.events.domain.repository import EventRepository
from gardenhub.modules.events.infrastructure.supabase_event_repository import SupabaseEventRepository
from gardenhub.modules.messaging.domain.repository import MessageRepository
from gardenhub.modules.messaging.infrastructure.supabase_message_repository import SupabaseMessageRepository
from gardenhub.modules.plots.domain.repository import PlotRepository
from gardenhub.modules.plots.infrastructure.supabase_plot_repository import SupabasePlotRepository
from gardenhub.modules.profiles.domain.repository import ProfileRepository
from gardenhub.modules.profiles.infrastructure.supabase_profile_repository import SupabaseProfileRepository
from gardenhub.modules.rules.domain.repository import RuleRepository
from gardenhub.modules.rules.infrastructure.supabase_rule_repository import SupabaseRuleRepository
from gardenhub.modules.task_board.domain.repositories.task_repository import TaskRepository
from gardenhub.modules.task_board.infrastructure.supabase_task_repository import SupabaseTaskRepository
from gardenhub.modules.weather.infrastructure.open_meteo_client import cleanup_weather_client

settings = get_settings()
logger = get_logger(__name__)

SERVICE_NAME = "gardenhub-api"

REPOSITORY_BINDINGS = {
    TaskRepository: SupabaseTaskRepository,
    PlotRepository: SupabasePlotRepository,
    EventRepository: SupabaseEventRepository,
    RuleRepository: SupabaseRuleRepository,
    MessageRepository: SupabaseMessageRepository,
    ProfileRepository: SupabaseProfileRepository,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup configures logging and the shared Supabase client; shutdown closes
    the Supabase realtime connection and the weather HTTP session.
    """
    setup_logging()
    log_startup_event(SERVICE_NAME, settings.APP_VERSION, extra={"environment": settings.ENVIRONMENT})

    try:
        await get_supabase_manager().get_client()
        logger.info("✅ Supabase client initialized")

        yield

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    finally:
        log_shutdown_event(SERVICE_NAME)
        try:
            await cleanup_weather_client()
            await cleanup_supabase()
            logger.info("✅ Garden hub shutdown complete")
        except Exception as e:
            logger.error(f"❌ Shutdown error: {e}")


def create_application() -> FastAPI:
    """
    Application factory function.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.ENABLE_SWAGGER_UI else None,
        redoc_url="/redoc" if settings.ENABLE_SWAGGER_UI else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    # Added first so it runs inside the error handler and sees its request ID
    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(ErrorHandlingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Whenever a service asks for a repository interface, hand it the Supabase implementation
    for interface, implementation in REPOSITORY_BINDINGS.items():
        app.dependency_overrides[interface] = implementation

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(GardenHubException)
    async def garden_hub_exception_handler(request: Request, exc: GardenHubException) -> JSONResponse:
        content = exc.to_dict()
        content["error"]["timestamp"] = datetime.now().isoformat()
        content["error"]["request_id"] = getattr(request.state, "request_id", None)
        return JSONResponse(status_code=exc.status_code, content=content)

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_application()


def main():
    """Run the development server (``gardenhub`` console script)."""
    uvicorn.run(
        "gardenhub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
        workers=1 if settings.RELOAD else settings.WORKERS,
    )


if __name__ == "__main__":
    main()
