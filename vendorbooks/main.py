import logging

from fastapi import FastAPI
from contextlib import asynccontextmanager
from vendorbooks.db.init_db import create_database
from vendorbooks.db.base import Base
from vendorbooks.db.session import engine
from vendorbooks.core.config import settings
from vendorbooks.core.logging import setup_logging
from vendorbooks.api.v1.router import api_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists and create tables
    create_database()
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.PROJECT_NAME} started.")
    yield


from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
def read_root():
    return {"Hello": "Vendorbooks"}
