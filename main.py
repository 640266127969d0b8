"""FastAPI application entry point for the User Tags Service.

Routers are mounted under ``/api``; the health check stays at the root.
Tables are created on startup.
"""

import logging
from contextlib import asynccontextmanager

from application.rest.routers import router_health, router_tags, router_users
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from infrastructure.models.base import Base
from utils.config import HOST, PORT
from utils.dependencies import engine

# Import ORM models so their tables are registered on Base.metadata
from infrastructure.models import associations, tag_orm, user_orm  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="User Tags Service",
    description="Users and tags management with a many-to-many association",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router_health.router, tags=["health"])
app.include_router(router_tags.router, prefix="/api", tags=["tags"])
app.include_router(router_users.router, prefix="/api", tags=["users"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
