# agency_portal/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from agency_portal.config.settings import settings
from agency_portal.config.database import engine
from agency_portal.core.middleware import setup_exception_handlers, setup_middleware
from agency_portal.shared.database.models import Base
from agency_portal.api.v1.router import api_router

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    print("🚀 Insurance Agency Portal API Starting...")
    print(f"📍 Version: {settings.version}")
    print(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    print(f"🔐 JWT Algorithm: {settings.algorithm}")
    print(f"⏰ Token Expire: {settings.access_token_expire_minutes} minutes")
    print(f"🗄️  Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'localhost'}")

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        print("✅ Database tables ready")

    yield

    # Shutdown
    print("🛑 Insurance Agency Portal API Shutting down...")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Role-based management of insurance sales agents, attendance, clients and reports",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)
setup_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "Insurance Agency Portal API",
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name,
        "environment": "production" if not settings.debug else "development"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "agency_portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
