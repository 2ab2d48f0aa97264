import asyncio
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

# Load environment variables as early as possible
load_dotenv()

from .config import settings
from .database import create_db_and_tables, engine
from .dependencies import build_auth_service
from .exceptions import AuthError, auth_exception_handler
from .routers import auth_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


def purge_codes_once() -> int:
    with Session(engine) as session:
        return build_auth_service(session).purge_expired_codes()


async def purge_codes_periodically(interval_seconds: int):
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(purge_codes_once)
        except Exception:
            logger.exception("Verification code purge failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.APP_NAME}...")
    if settings.SECRET_KEY == "change-me-in-prod":
        logger.warning("JWT_SECRET_KEY is not set; tokens are signed with the default key")
    create_db_and_tables()

    purge_task = None
    if settings.CODE_PURGE_INTERVAL_SECONDS > 0:
        purge_task = asyncio.create_task(purge_codes_periodically(settings.CODE_PURGE_INTERVAL_SECONDS))

    yield

    # Shutdown
    if purge_task is not None:
        purge_task.cancel()
        try:
            await purge_task
        except asyncio.CancelledError:
            pass
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.add_exception_handler(AuthError, auth_exception_handler)
app.include_router(auth_router)


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.APP_NAME, "version": settings.APP_VERSION}


# ------------------------
# Run with: python -m smsauth.main
# ------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "smsauth.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
