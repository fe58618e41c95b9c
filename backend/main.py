import logging

from fastapi import FastAPI, Request, status
import uvicorn
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from db.database import create_db_and_tables
from routers.admin import router as admin_router
from routers.categories import router as categories_router
from routers.inventory import router as inventory_router
from routers.products import router as products_router
from routers.reports import router as reports_router
from routers.search import router as search_router
from core.auth import fastapi_users, auth_backend
from core.config import settings
from core.logging import configure_logging
from contextlib import asynccontextmanager
from schemas.users import UserRead, UserCreate, UserUpdate

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Product Catalog API",
    description="API for managing products, categories, inventory and stock reports",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Every malformed request is a plain 400 bad request.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server Error"},
    )


@app.get("/")
async def root():
    return {"message": "Welcome to the Product Catalog API"}


# Authentication routes (fastapi-users)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"],)
app.include_router(fastapi_users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])

# Catalog routes
app.include_router(products_router, prefix="/products", tags=["products"])
app.include_router(categories_router, prefix="/categories", tags=["categories"])
app.include_router(search_router, prefix="/search", tags=["search"])
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])
app.include_router(reports_router, prefix="/reports", tags=["reports"])
app.include_router(admin_router, prefix="/admin", tags=["admin"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
