import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from cinebook.db.init_db import create_database
from cinebook.db.base import Base
from cinebook.db.session import engine
from cinebook.core.config import settings
from cinebook.api.v1.router import api_router
from cinebook.booking.errors import BookingError, InvalidStateTransition, NotAuthenticated, SeatConflict
from cinebook.schemas.common import ErrorResponse, InvalidTransitionError, SeatsUnavailableError

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure DB exists and create tables
    if settings.CREATE_DATABASE_ON_STARTUP:
        create_database()
    Base.metadata.create_all(bind=engine)
    yield


from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    """Render booking-core errors as ErrorResponse bodies with their status code."""
    if isinstance(exc, SeatConflict):
        body = SeatsUnavailableError(error=exc.code, message=exc.message, unavailable_seat_ids=exc.seat_ids)
    elif isinstance(exc, InvalidStateTransition):
        body = InvalidTransitionError(
            error=exc.code,
            message=exc.message,
            current_status=getattr(exc.current, "value", str(exc.current)),
            requested_status=getattr(exc.target, "value", str(exc.target)),
        )
    else:
        body = ErrorResponse(error=exc.code, message=exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, NotAuthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=headers)


app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
def read_root():
    return {"Hello": "CineBook"}
