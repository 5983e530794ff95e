"""Builders for tenants, clients and month data used across the billing tests"""

from datetime import date

from src.domain.attendance import Attendance, AttendanceStatus
from src.domain.billing import FacilityScale
from src.domain.client import Client
from src.domain.contract import Contract
from src.domain.price_item import PriceItem
from src.domain.tenant import Tenant

TENANT_ID = "tenant_meguro"

# April 2024 has 22 weekdays
APRIL_2024_WEEKDAYS = [
    date(2024, 4, day) for day in range(1, 31) if date(2024, 4, day).weekday() < 5
]


def make_tenant(**overrides) -> Tenant:
    values = dict(
        id=TENANT_ID,
        name="デイサービス目黒",
        slug="meguro-1312345678",
        city_name="目黒区",
        facility_scale=FacilityScale.NORMAL,
        improvement_addition_rate=None,
    )
    values.update(overrides)
    return Tenant(**values)


def make_client(client_id: int = 1, **overrides) -> Client:
    values = dict(
        id=client_id,
        tenant_id=TENANT_ID,
        name=f"利用者{client_id}",
        care_level=1,
        copayment_rate=1,
    )
    values.update(overrides)
    return Client(**values)


def make_contract(client_id: int = 1, services=None, **overrides) -> Contract:
    values = dict(
        id=client_id,
        tenant_id=TENANT_ID,
        client_id=client_id,
        start_on=date(2024, 4, 1),
        end_on=None,
        services={"bath": True, "rehabilitation": True} if services is None else services,
    )
    values.update(overrides)
    return Contract(**values)


def make_attendances(client_id: int = 1, days=None, start_id: int = 1):
    return [
        Attendance(
            id=start_id + index,
            tenant_id=TENANT_ID,
            client_id=client_id,
            service_date=service_date,
            status=AttendanceStatus.PRESENT,
        )
        for index, service_date in enumerate(days or APRIL_2024_WEEKDAYS)
    ]


def make_price_items(include=("day_service_basic", "bathing", "individual_functional_training")):
    prices = {
        "day_service_basic": ("通所介護7-8時間 要介護1", 7172),
        "bathing": ("入浴介助加算I", 436),
        "individual_functional_training": ("個別機能訓練加算Iロ", 828),
    }
    return [
        PriceItem(
            id=index + 1,
            tenant_id=TENANT_ID,
            code=code,
            name=prices[code][0],
            unit_price=prices[code][1],
            active=True,
        )
        for index, code in enumerate(include)
    ]

