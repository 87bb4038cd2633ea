from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
import logging
from sqlalchemy import text

from socialfeed.config import settings
from socialfeed.db.session import init_db, close_db, AsyncSessionLocal
from socialfeed.services.redis_service import close_redis
from socialfeed.api import session, feed, posts, likes, comments

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    # Startup
    logger.info(f"Starting up in {settings.ENVIRONMENT} mode...")

    try:
        await init_db()
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()
    await close_redis()

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Social feed: posts with images, likes and comments",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Public-read image bucket
app.mount(
    "/storage",
    StaticFiles(directory=Path(settings.STORAGE_DIR), check_dir=False),
    name="storage"
)

# Include routers
app.include_router(session.router, prefix=f"{settings.API_V1_PREFIX}/session", tags=["Session"])
app.include_router(feed.router, prefix=f"{settings.API_V1_PREFIX}/feed", tags=["Feed"])
app.include_router(posts.router, prefix=f"{settings.API_V1_PREFIX}/posts", tags=["Posts"])
app.include_router(likes.router, prefix=f"{settings.API_V1_PREFIX}/posts", tags=["Likes"])
app.include_router(comments.router, prefix=f"{settings.API_V1_PREFIX}/posts", tags=["Comments"])

@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Social Feed API",
        "version": settings.VERSION,
        "docs": "/api/docs",
        "redoc": "/api/redoc"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    database = "connected"
    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
        "timestamp": datetime.now().isoformat()
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "socialfeed.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
