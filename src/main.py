from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.config import settings
from src.database import init_db
from src.exceptions import register_exception_handlers
from src.logger import logger
from src.auth import router as auth_router
from src.catalog import router as catalog_router
from src.schedules import router as schedules_router
from src.seats import router as seats_router
from src.bookings import router as bookings_router

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
    yield

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Bus seat reservation API for commuters, operators and admins",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(
    auth_router.router,
    prefix=f"{settings.API_PREFIX}/users",
    tags=["Users"]
)

app.include_router(
    catalog_router.router,
    prefix=f"{settings.API_PREFIX}/admin",
    tags=["Admin Catalog"]
)

app.include_router(
    schedules_router,
    prefix=f"{settings.API_PREFIX}/operator/schedules",
    tags=["Operator Schedules"]
)

app.include_router(
    seats_router,
    prefix=f"{settings.API_PREFIX}/operator/schedules",
    tags=["Operator Seats"]
)

app.include_router(
    bookings_router,
    prefix=f"{settings.API_PREFIX}/commuter",
    tags=["Commuter"]
)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Bus Seat Reservation API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
