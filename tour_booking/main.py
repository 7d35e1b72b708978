from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import asyncio
import logging
from tour_booking.config import settings
from tour_booking.api import auth, tours, users, roles, bookings, payments, vouchers, statistics

logger = logging.getLogger(__name__)


def import_models():
    """Import every model module so Base.metadata knows all tables"""
    import tour_booking.models.tour
    import tour_booking.models.user
    import tour_booking.models.voucher
    import tour_booking.models.booking
    import tour_booking.models.payment

    return [
        tour_booking.models.tour.Tour,
        tour_booking.models.user.User,
        tour_booking.models.voucher.Voucher,
        tour_booking.models.booking.Booking,
        tour_booking.models.payment.Payment,
    ]


async def initialize_db():
    """Background task: wait for the database, then create missing tables"""
    if not settings.DB_AUTO_CREATE:
        logger.info("Skipping database initialization (DB_AUTO_CREATE disabled)")
        return

    from tour_booking.database import get_engine, Base, connect_with_retry

    logger.info("Waiting for database...")
    reachable = await asyncio.to_thread(
        connect_with_retry,
        max_retries=settings.DB_CONNECT_RETRIES,
        delay=settings.DB_CONNECT_DELAY,
    )
    if not reachable:
        logger.critical("DATABASE UNREACHABLE: background initialization failed.")
        return

    try:
        import_models()
        await asyncio.to_thread(Base.metadata.create_all, bind=get_engine())
        logger.info("Database schema is up to date.")
    except Exception as e:
        logger.error(f"SCHEMA ERROR: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the route table and start DB initialization without blocking startup"""
    logger.info("=" * 80)
    logger.info("REGISTERED ROUTES AT STARTUP:")
    for route in app.routes:
        if hasattr(route, "path") and hasattr(route, "methods"):
            logger.info(f"  {sorted(route.methods)} {route.path}")
    logger.info("=" * 80)

    asyncio.create_task(initialize_db())

    yield


app = FastAPI(
    title="Tour Booking System",
    description="Tours, bookings, payments, vouchers and users",
    version="1.0.0",
    lifespan=lifespan
)


# Global exception handler so clients always get JSON
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"GLOBAL ERROR: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__, "status": "error"}
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(auth.router)
app.include_router(tours.router)
app.include_router(users.router)
app.include_router(roles.router)
app.include_router(bookings.router)
app.include_router(payments.router)
app.include_router(vouchers.router)
app.include_router(statistics.router)


@app.get("/api/v1/health")
def health_check(response: Response):
    """Health check endpoint"""
    from tour_booking.database import check_database_health, get_connection_info

    db_health = check_database_health()
    if not db_health:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if db_health else "degraded",
        "database": "connected" if db_health else "unreachable",
        "connection": get_connection_info(),
        "version": app.version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tour_booking.main:app", host="0.0.0.0", port=8000)
