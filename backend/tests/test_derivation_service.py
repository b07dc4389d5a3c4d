# Overview: Pytest coverage for sale/loss derivation and loss target resolution.

import pytest

from restoledger.services.derivation_service import (
    LossPricing,
    MenuTarget,
    SaleTotals,
    StockTarget,
    check_loss_invariants,
    check_sale_invariants,
    derive_loss,
    derive_sale,
    loss_target_from_ids,
    resolve_loss_pricing,
)
from restoledger.validation import InvariantViolation, NotFoundError, ValidationError


class TestDeriveSale:
    def test_pizza_example(self):
        """2 x 15.99 with 8.50 cost -> 31.98 revenue, 17.00 cost, 14.98 profit."""
        totals = derive_sale(2, 1599, 850)
        assert totals == SaleTotals(total_revenue_cents=3198, total_cost_cents=1700, profit_cents=1498)

    @pytest.mark.parametrize("quantity,unit,cost", [(1, 0, 0), (7, 1299, 625), (250, 999_999, 1)])
    def test_totals_follow_the_formulas(self, quantity, unit, cost):
        totals = derive_sale(quantity, unit, cost)
        assert totals.total_revenue_cents == quantity * unit
        assert totals.total_cost_cents == quantity * cost
        assert totals.profit_cents == totals.total_revenue_cents - totals.total_cost_cents

    def test_negative_margin_is_representable(self):
        totals = derive_sale(3, 500, 800)
        assert totals.profit_cents == -900

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_below_one_rejected(self, quantity):
        with pytest.raises(ValidationError):
            derive_sale(quantity, 1599, 850)

    @pytest.mark.parametrize("quantity", [1.5, "2", True])
    def test_non_integer_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError):
            derive_sale(quantity, 1599, 850)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            derive_sale(1, -1, 850)
        with pytest.raises(ValidationError):
            derive_sale(1, 1599, -5)


class TestDeriveLoss:
    def test_menu_item_example(self):
        """3 pizzas lost: 3 * (8.50 + 7.49) = 47.97."""
        assert derive_loss(3, 850, 749).total_loss_cents == 4797

    def test_stock_item_example(self):
        """5 kg of tomatoes at 3.50 with no forgone profit -> 17.50."""
        assert derive_loss(5, 350, 0).total_loss_cents == 1750

    def test_negative_expected_profit_allowed(self):
        assert derive_loss(2, 800, -300).total_loss_cents == 1000

    def test_quantity_below_one_rejected(self):
        with pytest.raises(ValidationError):
            derive_loss(0, 350, 0)

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            derive_loss(1, -350, 0)


class TestLossTargets:
    def test_menu_id_builds_menu_target(self):
        assert loss_target_from_ids(4, None) == MenuTarget(menu_item_id=4)

    def test_stock_id_builds_stock_target(self):
        assert loss_target_from_ids(None, 9, "stock") == StockTarget(stock_item_id=9)

    def test_neither_id_rejected(self):
        with pytest.raises(ValidationError):
            loss_target_from_ids(None, None)

    def test_both_ids_rejected(self):
        with pytest.raises(ValidationError):
            loss_target_from_ids(1, 2)

    def test_item_type_must_agree_with_id(self):
        with pytest.raises(ValidationError):
            loss_target_from_ids(1, None, "stock")
        with pytest.raises(ValidationError):
            loss_target_from_ids(None, 1, "menu")
        with pytest.raises(ValidationError):
            loss_target_from_ids(1, None, "drink")


class TestResolveLossPricing:
    def test_menu_item_pricing(self, db_session, pizza):
        pricing = resolve_loss_pricing(MenuTarget(pizza.id))
        assert pricing == LossPricing(cost_price_cents=850, expected_profit_cents=749)

    def test_stock_item_has_no_expected_profit(self, db_session, tomatoes):
        pricing = resolve_loss_pricing(StockTarget(tomatoes.id))
        assert pricing == LossPricing(cost_price_cents=350, expected_profit_cents=0)

    def test_inactive_menu_item_still_resolves(self, db_session, pizza):
        pizza.is_active = False
        db_session.commit()
        assert resolve_loss_pricing(MenuTarget(pizza.id)).cost_price_cents == 850

    def test_missing_menu_item(self, db_session):
        with pytest.raises(NotFoundError):
            resolve_loss_pricing(MenuTarget(99999))

    def test_missing_stock_item(self, db_session):
        with pytest.raises(NotFoundError):
            resolve_loss_pricing(StockTarget(99999))


class TestInvariantChecks:
    def test_consistent_sale_passes(self):
        check_sale_invariants(
            quantity=2, unit_price_cents=1599, cost_price_cents=850,
            total_revenue_cents=3198, total_cost_cents=1700, profit_cents=1498,
        )

    def test_tampered_sale_raises(self):
        with pytest.raises(InvariantViolation):
            check_sale_invariants(
                quantity=2, unit_price_cents=1599, cost_price_cents=850,
                total_revenue_cents=3200, total_cost_cents=1700, profit_cents=1500,
            )

    def test_tampered_loss_raises(self):
        with pytest.raises(InvariantViolation):
            check_loss_invariants(quantity=3, cost_price_cents=850, expected_profit_cents=749, total_loss_cents=4796)
