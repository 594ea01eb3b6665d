import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.db.init_db import create_database
from app.db.base import Base
from app.db.session import engine
from app.core.config import settings
from app.core.exceptions import BookingError
from app.core.session_store import token_blacklist
from app.schemas.common import ErrorResponse
from app.api.v1.router import api_router

logger = logging.getLogger(__name__)


async def _blacklist_sweep_loop() -> None:
    """Background task: drop expired tokens from the logout blacklist."""
    while True:
        try:
            count = token_blacklist.sweep()
            if count:
                logger.info("Swept %d expired token(s) from the blacklist.", count)
        except Exception:
            logger.exception("Error during token blacklist sweep.")
        await asyncio.sleep(settings.BLACKLIST_SWEEP_INTERVAL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists and create tables
    create_database()
    Base.metadata.create_all(bind=engine)
    token_blacklist.init()

    sweep_task = asyncio.create_task(_blacklist_sweep_loop())
    yield

    # Shutdown: cancel background task
    sweep_task.cancel()
    try:
        await sweep_task
    except asyncio.CancelledError:
        pass
    token_blacklist.teardown()


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
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.error, message=exc.detail).model_dump(),
    )


app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
def read_root():
    return {"Hello": "Courtside"}
