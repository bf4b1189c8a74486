import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment is loaded by Pydantic Settings (see groupchat.core.settings).
from groupchat.api import register_routes
from groupchat.core.database import create_db_and_tables
from groupchat.core.exceptions import register_exception_handlers
from groupchat.core.logging import setup_logging
from groupchat.core.settings import settings

# Initialize logging early so all modules inherit the handlers/level
setup_logging(settings.resolved_log_level)

app = FastAPI(title="Group Chat API", debug=settings.debug)
register_exception_handlers(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app)

logger = logging.getLogger(__name__)
logger.info("%s API initialized", settings.app_name)


@app.on_event("startup")
def _create_tables_on_startup() -> None:
    """Create tables once at boot; there are no migrations."""
    create_db_and_tables()
    logger.info("Database tables ensured")
