from fastapi import FastAPI
from moving_quote.routes.location_router import location_router
from moving_quote.routes.quote_router import quote_router
from contextlib import asynccontextmanager
from moving_quote.core.config import settings
from moving_quote.core.logger import get_logger
from moving_quote.core.middleware import log_requests
from fastapi.middleware.cors import CORSMiddleware

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):

    logger.info(f"{settings.app_name} startup complete")

    yield

    logger.info(f"{settings.app_name} shutdown initiated")

app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
app.include_router(quote_router)
app.include_router(location_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
