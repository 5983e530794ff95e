import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWorkFactory
from src.domain.billing import FacilityScale
from src.domain.client import Client
from src.domain.contract import Contract
from src.domain.price_item import PriceItem
from src.domain.tenant import Tenant
from tests.fixtures.billing_data import APRIL_2024_WEEKDAYS, TENANT_ID, make_attendances


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a temporary SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'billing_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def uow_factory(session_factory):
    return SqlAlchemyUnitOfWorkFactory(session_factory)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """
    Tenant in 目黒区 with one care level 1 client attending every weekday of
    April 2024 with bathing and individual functional training
    """
    async with session_factory() as session:
        session.add(
            Tenant(
                id=TENANT_ID,
                name="デイサービス目黒",
                slug="meguro-1312345678",
                city_name="目黒区",
                facility_scale=FacilityScale.NORMAL,
            )
        )
        client = Client(tenant_id=TENANT_ID, name="利用者A", care_level=1, copayment_rate=1)
        session.add(client)
        session.add_all([
            PriceItem(tenant_id=TENANT_ID, code="day_service_basic", name="通所介護7-8時間 要介護1", unit_price=7172),
            PriceItem(tenant_id=TENANT_ID, code="bathing", name="入浴介助加算I", unit_price=436),
            PriceItem(
                tenant_id=TENANT_ID,
                code="individual_functional_training",
                name="個別機能訓練加算Iロ",
                unit_price=828,
            ),
        ])
        await session.flush()

        session.add(
            Contract(
                tenant_id=TENANT_ID,
                client_id=client.id,
                start_on=APRIL_2024_WEEKDAYS[0],
                services={"bath": True, "rehabilitation": True},
            )
        )
        for attendance in make_attendances(client.id, start_id=1):
            attendance.id = None
            session.add(attendance)
        await session.commit()
        return {"tenant_id": TENANT_ID, "client_id": client.id}
