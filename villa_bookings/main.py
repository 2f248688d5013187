# villa_bookings/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from villa_bookings.config import ALLOWED_ORIGINS, OPTIMISTIC_LOCKING
from villa_bookings.logging_config import setup_logging
from villa_bookings.middleware import RequestIDMiddleware
from villa_bookings.routes.bookings import router as bookings_router
from villa_bookings.routes.health import router as health_router
from villa_bookings.routes.metrics import router as metrics_router
from villa_bookings.routes.properties import router as properties_router
from villa_bookings.services.post_approval_hooks import post_approval_hooks

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Villa Bookings API",
    description="Property resolution and booking approval workflows",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(properties_router, tags=["Properties"])
app.include_router(bookings_router, tags=["Bookings"])


@app.on_event("startup")
def startup_event() -> None:
    """Log the effective workflow configuration on startup."""
    logger.info(
        "application_started",
        optimistic_locking=OPTIMISTIC_LOCKING,
        post_approval_hooks=post_approval_hooks.enabled_hooks(),
    )
