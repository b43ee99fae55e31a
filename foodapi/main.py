import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from foodapi.config import Config
from foodapi.db.database import db
from foodapi.routers import categories, contact, health, products
from foodapi.exceptions import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Path(Config.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    await db.connect()
    if Config.CREATE_TABLES:
        await db.create_tables()
    yield
    await db.disconnect()


app = FastAPI(
    title="FoodAPI",
    version="1.0.0",
    description="Menu catalogue for a food-ordering platform: products, categories and contact messages",
    lifespan=lifespan
)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uploaded images; the directory is created on startup
app.mount(
    Config.UPLOAD_URL_PREFIX,
    StaticFiles(directory=Config.UPLOAD_DIR, check_dir=False),
    name="uploads"
)

# Include routers
app.include_router(health.router)
app.include_router(products.router)
app.include_router(categories.router)
app.include_router(contact.router)
