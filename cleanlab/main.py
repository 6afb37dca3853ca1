from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from cleanlab.config import settings
from cleanlab.database import init_db
from cleanlab.errors import CleanLabError
from cleanlab.logger import logger, setup_logging
from cleanlab.api import admin, auth, bookings, routes
from cleanlab.services.scheduler import start_scheduler, stop_scheduler

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    start_scheduler()
    logger.info(f"{settings.app_name} started - Scheduler running")
    yield
    stop_scheduler()
    logger.info(f"{settings.app_name} stopped")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CleanLabError)
async def cleanlab_error_handler(request: Request, exc: CleanLabError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "unexpected", "message": "Internal server error"},
    )


# Include routers
app.include_router(routes.router)
app.include_router(auth.router)
app.include_router(bookings.router)
app.include_router(admin.router)


@app.get("/")
def read_root():
    return {
        "message": f"{settings.app_name} API is running",
        "docs": "/docs",
        "health": "/api/health",
        "endpoints": {
            "services": "/api/services",
            "auth": "/api/auth",
            "bookings": "/api/bookings",
            "admin": "/api/admin",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
