"""
Unit tests for DeliveryPricer
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from marketplace.core.exceptions import InvalidDeliveryMethodError, NotFoundError
from marketplace.services.delivery_pricer import DeliveryPricer

from factories import S1, S2


@pytest.fixture
def pricer():
    stores = {
        S1: SimpleNamespace(id=S1, store_name="Clay Corner", standard_price=Decimal("50"), standard_eta_days=3,
                            express_price=Decimal("80.005"), express_eta_days=1),
        S2: SimpleNamespace(id=S2, store_name="Bright Lights", standard_price=Decimal("0"), standard_eta_days=None,
                            express_price=Decimal("25.00"), express_eta_days=2),
    }
    return DeliveryPricer(stores)


class TestResolve:

    def test_standard(self, pricer):
        quote = pricer.resolve(S1, "standard")

        assert quote.store_id == S1
        assert quote.method == "standard"
        assert quote.price == Decimal("50.00")
        assert quote.eta_days == 3
        assert quote.store_name == "Clay Corner"

    def test_express_price_is_rounded_to_cents(self, pricer):
        quote = pricer.resolve(S1, "express")

        assert quote.price == Decimal("80.01")
        assert quote.eta_days == 1

    def test_free_delivery_without_eta(self, pricer):
        quote = pricer.resolve(S2, "standard")

        assert quote.price == Decimal("0.00")
        assert quote.eta_days is None

    @pytest.mark.parametrize("method", [None, "", "overnight", "Standard"])
    def test_invalid_method(self, pricer, method):
        with pytest.raises(InvalidDeliveryMethodError) as exc_info:
            pricer.resolve(S1, method)

        assert exc_info.value.details == {"store_id": S1, "delivery_method": method}
        assert exc_info.value.status_code == 400

    def test_unknown_store_is_checked_before_method(self, pricer):
        with pytest.raises(NotFoundError) as exc_info:
            pricer.resolve(99, "overnight")

        assert exc_info.value.details["entity"] == "Store"


def test_options_lists_both_methods(pricer):
    options = pricer.options(S2)

    assert set(options) == {"standard", "express"}
    assert options["express"].price == Decimal("25.00")


def test_options_for_skips_unknown_stores(pricer):
    options = pricer.options_for([S1, 99, S1])

    assert list(options) == [S1]
    assert options[S1]["standard"].store_name == "Clay Corner"
