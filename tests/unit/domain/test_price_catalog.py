"""Unit tests for PriceCatalog"""

from datetime import date

from src.domain.billing import PriceCatalog
from src.domain.price_item import PriceItem


def _item(item_id, code="bathing", unit_price=436, active=True, valid_from=None, valid_to=None):
    return PriceItem(
        id=item_id,
        tenant_id="tenant_meguro",
        code=code,
        name="入浴介助加算I",
        unit_price=unit_price,
        active=active,
        valid_from=valid_from,
        valid_to=valid_to,
    )


class TestPriceCatalog:
    def test_lookup_by_code(self):
        catalog = PriceCatalog([_item(1), _item(2, code="day_service_basic", unit_price=7172)])

        quote = catalog.lookup("day_service_basic", date(2024, 4, 1))

        assert quote.price_item_id == 2
        assert quote.unit_price == 7172

    def test_unknown_code(self):
        assert PriceCatalog([_item(1)]).lookup("meal", date(2024, 4, 1)) is None

    def test_inactive_item_ignored(self):
        assert PriceCatalog([_item(1, active=False)]).lookup("bathing", date(2024, 4, 1)) is None

    def test_validity_window(self):
        catalog = PriceCatalog([_item(1, valid_from=date(2024, 4, 10), valid_to=date(2024, 4, 20))])

        assert catalog.lookup("bathing", date(2024, 4, 9)) is None
        assert catalog.lookup("bathing", date(2024, 4, 10)) is not None
        assert catalog.lookup("bathing", date(2024, 4, 20)) is not None
        assert catalog.lookup("bathing", date(2024, 4, 21)) is None

    def test_latest_valid_from_wins(self):
        """
        Given: Two listings of one code both valid on the date
        When: The price is looked up
        Then: The listing with the latest valid_from is used
        """
        catalog = PriceCatalog([
            _item(1, unit_price=400, valid_from=date(2023, 4, 1)),
            _item(2, unit_price=436, valid_from=date(2024, 4, 1)),
        ])

        assert catalog.lookup("bathing", date(2024, 4, 15)).unit_price == 436
        assert catalog.lookup("bathing", date(2024, 3, 15)).unit_price == 400
