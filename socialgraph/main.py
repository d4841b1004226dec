# socialgraph/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from socialgraph.core.config import settings
from socialgraph.common.errors import register_exception_handlers
from socialgraph.db.base_class import Base
from socialgraph.db.session import engine
from socialgraph import models  # noqa: F401  registers every table on Base.metadata
from socialgraph.routers import contacts, friends, notifications, profile, verification

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create missing tables on startup
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="socialgraph", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(profile.router, prefix="/api/v1/profile", tags=["profile"])
app.include_router(verification.router, prefix="/api/v1/verification", tags=["verification"])
app.include_router(contacts.router, prefix="/api/v1/contacts", tags=["contacts"])
app.include_router(friends.router, prefix="/api/v1/friends", tags=["friends"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["notifications"])


@app.get("/")
def read_root():
    return {"message": "socialgraph API is running"}
