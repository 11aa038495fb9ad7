import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.container import ServiceContainer, build_container
from app.infrastructure.database import initialize_database, session_scope
from app.infrastructure.scheduler import build_scheduler, start_scheduler, stop_scheduler
from app.infrastructure.template_files import seed_templates
from app.interfaces.api.routes import register_routes
from app.utils import get_app_timezone

logger = logging.getLogger(__name__)


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Create and configure the notification service application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Prepare storage and templates, then run the retention scheduler."""

        services = container or build_container()
        app.state.container = services
        settings = services.settings

        initialize_database(bind=services.engine)
        with session_scope(services.session_factory) as session:
            seed_templates(session, settings.notification_templates_dir)

        scheduler = None
        if settings.notification_cleanup_enabled:
            scheduler = build_scheduler(
                services.cleanup_job,
                schedule=settings.notification_cleanup_schedule,
                timezone=get_app_timezone(),
            )
            start_scheduler(scheduler)
        else:
            logger.info("Notification cleanup job disabled")

        yield

        if scheduler is not None:
            stop_scheduler(scheduler, services.cleanup_job)
        if container is None:
            services.engine.dispose()

    app = FastAPI(title="Notification Service", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origin_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
