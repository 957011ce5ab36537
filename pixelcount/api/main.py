"""
FastAPI Application Entry Point

Display API for pixelcount: current total, refresh/close messages,
a server-sent event stream and Prometheus metrics.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from prometheus_client import make_asgi_app

from .dependencies import create_session
from .routes import health
from .routes.pixels import router as pixels_router
from .middleware.tracing import TracingMiddleware
from ..document.loader import PageLoadError
from ..document.nodes import PageNotLoadedError
from ..observability.logging import setup_logging, get_logger
from ..observability.metrics import setup_metrics
from ..observability.tracing import setup_tracing
from ..session.controller import QueueEventSink
from ..core.config import settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    setup_tracing()
    setup_metrics()

    app.state.event_sink = QueueEventSink(maxsize=settings.event_queue_size)
    app.state.session = None
    try:
        app.state.session = create_session(
            settings.document_path_absolute, app.state.event_sink
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error("api.session_unavailable", error=str(e))

    if app.state.session is not None:
        try:
            await app.state.session.start()
        except (PageLoadError, PageNotLoadedError) as e:
            # Startup stays up; the display can retry with refresh
            logger.error("api.initial_count_failed", page_id=e.page_id, error=str(e))

    yield

    # Shutdown
    if app.state.session is not None:
        app.state.session.close()


app = FastAPI(
    title="pixelcount API",
    description="Total rendered pixel area of a design document",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(TracingMiddleware)

# Mount Prometheus metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

app.include_router(health.router, tags=["Health"])
app.include_router(pixels_router, prefix="/api/v1", tags=["Pixels"])
