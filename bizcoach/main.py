"""Main FastAPI application."""
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from bizcoach.config import settings
from bizcoach.assistant import routes as assistant_routes
from bizcoach.database import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables in the local store if they are missing
    await init_db()
    app.state.reminder_scan_lock = asyncio.Lock()
    yield


# Create FastAPI app
app = FastAPI(
    title="Bizcoach API",
    description="Local business assistant for small shops - credit, sales and loyalty heuristics",
    version="0.3.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(assistant_routes.router, prefix=f"{settings.API_V1_PREFIX}/assistant", tags=["Assistant"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Bizcoach API",
        "version": "0.3.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "bizcoach.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
