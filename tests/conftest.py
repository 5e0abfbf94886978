import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from bowlnow.db.database import Base, get_db
from bowlnow import models  # noqa: F401
from bowlnow.main import app, limiter
from bowlnow.api.deps import get_gateway
from bowlnow.services.storage import Storage
from bowlnow.services.stripe_service import StripeGateway, GatewaySuccess, GatewayDegradation


class FakeGateway(StripeGateway):
    """Records calls instead of talking to Stripe"""

    def __init__(self, fail_with=None, invoices=None, customers=None, webhook_secret=None):
        super().__init__(api_key="sk_test_fake", webhook_secret=webhook_secret)
        self.fail_with = fail_with
        self.invoices = invoices or []
        self.customers = customers or {}
        self.created = []

    def create_invoice(self, client, invoice_number, amount, description=None):
        if self.fail_with:
            return GatewayDegradation("invoice.create", self.fail_with)
        self.created.append((client.id, invoice_number, amount))
        return GatewaySuccess(f"in_{len(self.created)}")

    def list_invoices(self, limit=100):
        if self.fail_with:
            return GatewayDegradation("invoice.list", self.fail_with)
        return GatewaySuccess(list(self.invoices[:limit]))

    def retrieve_customer(self, customer_id):
        if customer_id not in self.customers:
            return GatewayDegradation("customer.retrieve", "No such customer")
        return GatewaySuccess(self.customers[customer_id])


@pytest.fixture(autouse=True)
def disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def storage(session_factory):
    async with session_factory() as session:
        yield Storage(session)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest_asyncio.fixture
async def client(session_factory, gateway):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def client_payload(**overrides):
    payload = {
        "businessName": "Strike Zone Lanes",
        "contactName": "Dana Pins",
        "email": "dana@strikezone.test",
        "phone": "555-0100",
    }
    payload.update(overrides)
    return payload
