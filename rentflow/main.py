from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.database import init_db
from .core.config import settings
from .core.exception_handler import setup_exception_handlers
from .core.logging_config import configure_logging
from .routers.auth import router as auth_router
from .routers.pricing import router as pricing_router
from .routers.mobile import router as mobile_router

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables
    init_db()
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Configure CORS
raw_origins = settings.CORS_ORIGINS or "*"
origins = [o.strip() for o in raw_origins.split(",") if o.strip()] if isinstance(raw_origins, str) else raw_origins
allow_credentials = False if "*" in origins else True
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(pricing_router)
app.include_router(mobile_router)

@app.get("/")
def root():
    return {"status": "ok"}

@app.get("/health")
def health():
    return {"status": "healthy"}
