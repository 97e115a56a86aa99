"""
Pytest configuration and fixtures for GAIA tests.
"""
import os
import tempfile

# Set test environment before importing app modules
_TEST_DIR = tempfile.mkdtemp(prefix="gaia-tests-")
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key-for-unit-tests-only"
os.environ["DB_PATH"] = os.path.join(_TEST_DIR, "gaia.db")
os.environ["SEED_ON_STARTUP"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gaia.core.database import create_engine, create_session_factory, get_db, init_db
from gaia.core.security import create_access_token, get_password_hash
from gaia.db.seed import seed_database
from gaia.main import app
from gaia.models import Order, OrderItem, User


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite database per test."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the app, with get_db pointed at the test database."""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Demo catalog, users, content and promo codes."""
    async with session_factory() as session:
        await seed_database(session)


async def _create_user(session_factory, email: str, role: str = "customer", name: str = "Test User") -> User:
    async with session_factory() as session:
        user = User(name=name, email=email, password=get_password_hash("password123"), role=role)
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def customer(session_factory) -> User:
    return await _create_user(session_factory, "customer@example.com", name="Asha Rao")


@pytest_asyncio.fixture
async def other_customer(session_factory) -> User:
    return await _create_user(session_factory, "other@example.com", name="Ravi Kumar")


@pytest_asyncio.fixture
async def admin(session_factory) -> User:
    return await _create_user(session_factory, "boss@example.com", role="admin", name="Store Admin")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def customer_headers(customer) -> dict:
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin) -> dict:
    return auth_headers(admin)


@pytest.fixture
def make_order(session_factory):
    """Insert an order directly, bypassing the API."""
    async def _make_order(user_id=None, status="pending", order_id=None, guest_email=None, items=(), **fields):
        async with session_factory() as session:
            order = Order(
                id=order_id,
                user_id=user_id,
                guest_email=guest_email,
                status=status,
                subtotal=fields.pop("subtotal", 998),
                discount=fields.pop("discount", 0),
                shipping_cost=fields.pop("shipping_cost", 0),
                total=fields.pop("total", 998),
                shipping_address=fields.pop("shipping_address", {"name": "A", "city": "Pune", "country": "India"}),
                payment_method=fields.pop("payment_method", "cod"),
                **fields,
            )
            session.add(order)
            await session.flush()
            session.add_all(
                OrderItem(order_id=order.id, product_id=product_id, quantity=quantity, price=price)
                for product_id, quantity, price in items
            )
            await session.commit()
            return order.id

    return _make_order
