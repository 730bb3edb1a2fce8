# 📄 File: gardenhub/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# The signpost for the garden hub's API: sends task requests to the task board,
# plot requests to the plots module, and so on.
# 🧪 Purpose (Technical Summary):
# Aggregates the module routers under their v1 prefixes and tags.
# 🔗 Dependencies:
# FastAPI, every module's presentation.api.v1 router
# 🔄 Connected Modules / Calls From:
# gardenhub.main

from fastapi import APIRouter

from gardenhub.modules.events.presentation.api.v1.events import events_router
from gardenhub.modules.messaging.presentation.api.v1.messages import messages_router
from gardenhub.modules.plots.presentation.api.v1.plots import plots_router
from gardenhub.modules.profiles.presentation.api.v1.profiles import profiles_router
from gardenhub.modules.rules.presentation.api.v1.rules import rules_router
from gardenhub.modules.task_board.presentation.api.v1.tasks import tasks_router
from gardenhub.modules.weather.presentation.api.v1.weather import weather_router

from .health import health_router

ROUTE_PREFIXES = {
    "tasks": "/tasks",
    "plots": "/plots",
    "events": "/events",
    "rules": "/rules",
    "messages": "/messages",
    "weather": "/weather",
    "profiles": "/profiles",
}

api_v1_router = APIRouter()

api_v1_router.include_router(health_router, tags=["Health Check"])
api_v1_router.include_router(tasks_router, prefix=ROUTE_PREFIXES["tasks"], tags=["Task Board"])
api_v1_router.include_router(plots_router, prefix=ROUTE_PREFIXES["plots"], tags=["Garden Plots"])
api_v1_router.include_router(events_router, prefix=ROUTE_PREFIXES["events"], tags=["Events"])
api_v1_router.include_router(rules_router, prefix=ROUTE_PREFIXES["rules"], tags=["Rules"])
api_v1_router.include_router(messages_router, prefix=ROUTE_PREFIXES["messages"], tags=["Messages"])
api_v1_router.include_router(weather_router, prefix=ROUTE_PREFIXES["weather"], tags=["Weather"])
api_v1_router.include_router(profiles_router, prefix=ROUTE_PREFIXES["profiles"], tags=["Profiles"])


@api_v1_router.get("/", summary="API v1 Information", tags=["API Info"])
async def api_v1_info() -> dict:
    return {
        "version": "v1",
        "endpoints": {name: f"/api/v1{prefix}" for name, prefix in ROUTE_PREFIXES.items()},
        "health_check": "/api/v1/health",
    }
