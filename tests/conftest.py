"""
Shared fixtures: an in-memory SQLite database per test, an httpx client bound
to the FastAPI app, and small factories for categories and products.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import itertools
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.auth import current_active_superuser
from db.category import Category
from db.database import create_db_and_tables, get_async_session
from db.product import Product, ProductVariant
from db.users import User
from main import app

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def admin_user():
    return User(
        id=uuid.uuid4(),
        email="admin@example.com",
        hashed_password="not-used",
        is_active=True,
        is_superuser=True,
        is_verified=True,
    )


def _override_session(session_maker):
    async def _get_session():
        async with session_maker() as session:
            yield session
    return _get_session


@pytest.fixture
async def client(session_maker, admin_user):
    app.dependency_overrides[get_async_session] = _override_session(session_maker)
    app.dependency_overrides[current_active_superuser] = lambda: admin_user
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(session_maker):
    """Client without the superuser override: real fastapi-users auth applies."""
    app.dependency_overrides[get_async_session] = _override_session(session_maker)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_category(db):
    async def _make(name: str) -> Category:
        category = Category(name=name)
        db.add(category)
        await db.commit()
        return category
    return _make


@pytest.fixture
def make_product(db):
    """Insert a product; creation times increase by one minute per call."""
    clock = itertools.count()

    async def _make(name, price="10.00", stock=0, variants=(), category=None, description=None, **extra) -> Product:
        product = Product(
            name=name,
            description=description,
            price=Decimal(str(price)),
            stock=stock,
            category_id=category.id if category is not None else None,
            created_at=BASE_TIME + timedelta(minutes=next(clock)),
            variants=[
                ProductVariant(size=size, color=color, stock=vstock, position=i)
                for i, (size, color, vstock) in enumerate(variants)
            ],
            **extra,
        )
        db.add(product)
        await db.commit()
        return product
    return _make


def transient_product(name="Item", price="10", stock=0, variants=(), category=None) -> Product:
    """Product that never touches a session, for pure core tests."""
    return Product(
        id=uuid.uuid4(),
        name=name,
        price=Decimal(str(price)),
        stock=stock,
        category=category,
        variants=[
            ProductVariant(size=size, color=color, stock=vstock, position=i)
            for i, (size, color, vstock) in enumerate(variants)
        ],
    )
