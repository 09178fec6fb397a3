"""API routes."""

from tip_triage.api.routes.health import router as health_router
from tip_triage.api.routes.queue import router as queue_router
from tip_triage.api.routes.review import router as review_router
from tip_triage.api.routes.stats import router as stats_router
from tip_triage.api.routes.tips import router as tips_router
from tip_triage.api.routes.tipsters import router as tipsters_router

__all__: list[str] = [
    "health_router",
    "queue_router",
    "review_router",
    "stats_router",
    "tips_router",
    "tipsters_router",
]
