"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from groupchat.config import settings
from groupchat.errors import MembershipError
from groupchat.services import user_service
from groupchat.sinks import build_sink
from groupchat.store import EntityStore

# Import routers
from groupchat.routers import auth, channels, groups, interests, reports, users

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the entity store from the configured sink; write a final snapshot on shutdown."""
    configure_logging(settings.LOG_LEVEL)
    sink = build_sink(settings)
    store = EntityStore.from_snapshot(sink.load(), sink=sink)
    user_service.bootstrap_super_admin(
        store,
        settings.BOOTSTRAP_SUPER_USERNAME,
        settings.BOOTSTRAP_SUPER_PASSWORD,
        settings.BOOTSTRAP_SUPER_EMAIL,
    )
    app.state.store = store
    logger.info("Entity store ready (%s snapshots)", settings.SNAPSHOT_BACKEND)
    yield
    store.persist()
    logger.info("Final snapshot written")


app = FastAPI(
    title="Group Chat Access Control",
    description="Users, groups, channels, join requests and reports with a three-tier role hierarchy",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MembershipError)
async def membership_error_handler(request: Request, exc: MembershipError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(groups.router, prefix="/api/groups", tags=["Groups"])
app.include_router(interests.router, prefix="/api/groups", tags=["Interests"])
app.include_router(channels.router, prefix="/api/channels", tags=["Channels"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
