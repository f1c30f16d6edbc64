# barberzon/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import LOG_LEVEL, FRONTEND_URL
from .db import init_db
from .routers import (
    auth_routes,
    barbers_routes,
    bookings_routes,
    customers_routes,
    join_requests_routes,
    notifications_routes,
    payments_routes,
    shops_routes,
)

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()
    logger.info("Database tables created successfully")
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Barberzon API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api"

for module in (
    auth_routes,
    customers_routes,
    barbers_routes,
    shops_routes,
    bookings_routes,
    payments_routes,
    notifications_routes,
    join_requests_routes,
):
    app.include_router(module.router, prefix=API_PREFIX)
app.include_router(payments_routes.webhook_router, prefix=API_PREFIX)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
