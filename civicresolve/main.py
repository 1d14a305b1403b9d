"""
Main FastAPI application
"""
import os
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from civicresolve.config import get_settings
from civicresolve.database import engine, Base, AsyncSessionLocal
from civicresolve.errors import CivicError
from civicresolve.models.contractor import Contractor
from civicresolve.services.contractor_ledger import ContractorLedger
from civicresolve.api import complaints, contractors, users, analysis
from civicresolve.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

DEFAULT_CONTRACTORS = [
    ("CTR-001", "L&T Infrastructure", 4.5),
    ("CTR-002", "Shapoorji Pallonji", 4.2),
    ("CTR-003", "Gammon India", 3.9),
    ("CTR-004", "HCC Ltd", 4.0),
    ("CTR-005", "NCC Ltd", 3.7),
    ("CTR-006", "Afcons Infrastructure", 4.1),
]


async def seed_contractors() -> None:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Contractor))
        if result.scalars().first():
            return
        ledger = ContractorLedger(session)
        for contractor_id, name, rating in DEFAULT_CONTRACTORS:
            await ledger.register(contractor_id, name, quality_rating=rating)
        await session.commit()
        logger.info(f"Seeded {len(DEFAULT_CONTRACTORS)} default contractors")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")

    if settings.SEED_CONTRACTORS:
        await seed_contractors()

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CivicError)
async def civic_error_handler(request: Request, exc: CivicError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(complaints.router, prefix="/api/complaints", tags=["Complaints"])
app.include_router(contractors.router, prefix="/api/contractors", tags=["Contractors"])
app.include_router(users.router, prefix="/api/user", tags=["Rewards"])
app.include_router(analysis.router, prefix="/api", tags=["Analysis"])

# Uploaded complaint photos
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "civicresolve.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
