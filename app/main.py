import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi_pagination import add_pagination

import models
from config import settings
from database import engine
from errors import AppError, app_error_handler
from routes import analytics, auth, events, notifications, registrations
from utils import run_migrations

# ---------------------------------------------------------
# INITIALIZATION & CONFIGURATION
# ---------------------------------------------------------

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def init_db():
    if settings.AUTO_MIGRATE:
        logger.info("Running database migrations")
        run_migrations()
    else:
        models.Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("API ready (database: %s)", engine.url.get_backend_name())
    yield


app = FastAPI(title="Smart Campus Events API", lifespan=lifespan)
add_pagination(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_exception_handler(AppError, app_error_handler)


# ---------------------------------------------------------
# ROUTES
# ---------------------------------------------------------

@app.get("/api/health")
def health():
    return {"status": "ok"}


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(events.router, prefix="/api/events", tags=["events"])
app.include_router(registrations.router, prefix="/api/registrations", tags=["registrations"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
