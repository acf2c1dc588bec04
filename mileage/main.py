from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mileage.core.config import settings
from mileage.core.database import Base, engine
from mileage.core.errors import setup_error_handlers
from mileage.core.logging import setup_logging
from mileage.models.user import User  # noqa: F401
from mileage.models.profile import Profile  # noqa: F401
from mileage.models.meetup import Meetup  # noqa: F401
from mileage.models.location import Location  # noqa: F401
from mileage.models.meetup_participant import MeetupParticipant  # noqa: F401
from mileage.models.comment import Comment  # noqa: F401

from mileage.api.routes.auth import router as auth_router
from mileage.api.routes.meetups import router as meetups_router
from mileage.api.routes.participants import router as participants_router
from mileage.api.routes.comments import router as comments_router
from mileage.api.routes.profiles import router as profiles_router


setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Mighty Mileage Meetup API", version="0.1.0", lifespan=lifespan)

# CORS first
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=False,
)

setup_error_handlers(app)

app.include_router(auth_router)
app.include_router(meetups_router)
app.include_router(participants_router)
app.include_router(comments_router)
app.include_router(profiles_router)


@app.get("/")
def root():
    return {"status": "ok", "message": "Mighty Mileage Meetup API"}


@app.get("/health")
def health():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mileage.main:app", host="0.0.0.0", port=8000, reload=settings.DEV)
