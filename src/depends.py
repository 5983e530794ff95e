from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWorkFactory
from src.app.use_cases.billing import GenerateInvoices
from src.domain.billing import RoundingPolicy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


def get_unit_of_work_factory(session_factory=None) -> SqlAlchemyUnitOfWorkFactory:
    return SqlAlchemyUnitOfWorkFactory(session_factory or AsyncSessionLocal)


def get_generate_invoices(uow_factory=None, config=ApplicationConfig) -> GenerateInvoices:
    return GenerateInvoices(
        uow_factory=uow_factory or get_unit_of_work_factory(),
        rounding_policy=RoundingPolicy.from_config(config),
        base_price_code=config.BASE_PRICE_CODE,
        base_service_code=config.BASE_SERVICE_CODE,
        conflict_retries=config.GENERATION_CONFLICT_RETRIES,
        concurrency=config.GENERATION_CONCURRENCY,
    )
