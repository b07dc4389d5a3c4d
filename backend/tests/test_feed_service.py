# Overview: Pytest coverage for the merged sales/losses transaction feed.

from datetime import datetime
from types import SimpleNamespace

import pytest

from restoledger.services.feed_service import (
    UNKNOWN_ITEM,
    FeedFilter,
    build_feed_filter,
    compose_feed,
    get_transaction_feed,
)
from restoledger.services import stock_service
from restoledger.validation import ValidationError


MAR_01 = datetime(2024, 3, 1, 9, 0)
MAR_02 = datetime(2024, 3, 2, 9, 0)
MAR_03 = datetime(2024, 3, 3, 9, 0)

BRANCH = SimpleNamespace(name="Downtown Branch")


def _sale(record_id, when, revenue=1000, org=1, name="Pizza"):
    return SimpleNamespace(
        id=record_id,
        organization_id=org,
        organization=BRANCH,
        menu_item=SimpleNamespace(name=name),
        sale_date=when,
        total_revenue_cents=revenue,
        quantity=1,
    )


def _loss(record_id, when, amount=500, org=1, menu_name=None, stock_name=None):
    return SimpleNamespace(
        id=record_id,
        organization_id=org,
        organization=BRANCH,
        menu_item=SimpleNamespace(name=menu_name) if menu_name else None,
        stock_item=SimpleNamespace(name=stock_name) if stock_name else None,
        loss_date=when,
        total_loss_cents=amount,
        quantity=1,
    )


class TestComposeFeed:
    def test_newest_first_across_kinds(self):
        feed = compose_feed(
            [_sale(1, MAR_01), _sale(2, MAR_03)],
            [_loss(1, MAR_02, stock_name="Tomatoes")],
        )

        assert [(line.kind, line.record_id) for line in feed] == [("Sale", 2), ("Loss", 1), ("Sale", 1)]
        dates = [line.date for line in feed]
        assert dates == sorted(dates, reverse=True)

    def test_equal_dates_keep_sales_then_losses_order(self):
        sales = [_sale(7, MAR_01), _sale(3, MAR_01)]
        losses = [_loss(9, MAR_01, menu_name="Pizza"), _loss(2, MAR_01, menu_name="Pizza")]

        first = compose_feed(sales, losses)
        second = compose_feed(sales, losses)

        assert [(line.kind, line.record_id) for line in first] == [
            ("Sale", 7), ("Sale", 3), ("Loss", 9), ("Loss", 2),
        ]
        assert first == second

    def test_amounts_are_signed(self):
        feed = compose_feed([_sale(1, MAR_02, revenue=3198)], [_loss(1, MAR_01, amount=4797, menu_name="Pizza")])

        assert [line.amount_cents for line in feed] == [3198, -4797]

    def test_loss_item_name_fallback(self):
        feed = compose_feed([], [
            _loss(1, MAR_03, menu_name="Pizza"),
            _loss(2, MAR_02, stock_name="Tomatoes"),
            _loss(3, MAR_01),
        ])

        assert [line.item_name for line in feed] == ["Pizza", "Tomatoes", UNKNOWN_ITEM]

    @pytest.mark.parametrize("kind,expected", [("sales", {"Sale"}), ("losses", {"Loss"})])
    def test_kind_filter(self, kind, expected):
        feed = compose_feed([_sale(1, MAR_01)], [_loss(1, MAR_02)], FeedFilter(kind=kind))
        assert {line.kind for line in feed} == expected

    def test_each_date_bound_applies_on_its_own(self):
        sales = [_sale(1, MAR_01), _sale(2, MAR_02), _sale(3, MAR_03)]

        from_second = compose_feed(sales, [], FeedFilter(start=MAR_02))
        until_second = compose_feed(sales, [], FeedFilter(end=MAR_02))

        assert [line.record_id for line in from_second] == [3, 2]
        assert [line.record_id for line in until_second] == [2, 1]

    def test_organization_filter(self):
        feed = compose_feed([_sale(1, MAR_01, org=1), _sale(2, MAR_02, org=2)], [], FeedFilter(organization_id=2))
        assert [line.record_id for line in feed] == [2]

    def test_empty_input(self):
        assert compose_feed([], []) == []

    def test_line_serialization(self):
        line = compose_feed([_sale(5, MAR_01, revenue=299, name="Coca Cola")], [])[0]
        assert line.to_dict() == {
            "kind": "Sale",
            "id": 5,
            "date": "2024-03-01T09:00:00Z",
            "amount_cents": 299,
            "item_name": "Coca Cola",
            "organization_name": "Downtown Branch",
            "quantity": 1,
        }


class TestFeedFilter:
    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            FeedFilter(kind="refunds")

    def test_build_from_query_values(self):
        f = build_feed_filter(organization_id=4, start="2024-03-01", end="", kind="losses")
        assert f == FeedFilter(organization_id=4, start=datetime(2024, 3, 1), end=None, kind="losses")

    def test_build_blank_kind_means_both(self):
        assert build_feed_filter(kind="").kind is None


class TestTransactionFeed:
    def test_reads_sales_and_losses_from_storage(self, db_session, org_a, org_b, pizza, tomatoes,
                                                 record_sale, record_loss):
        record_sale(org_a, pizza, 2, sale_date=MAR_01)
        record_sale(org_b, pizza, 1, sale_date=MAR_03)
        record_loss(org_a, stock_item=tomatoes, quantity=5, loss_date=MAR_02)

        feed = get_transaction_feed()

        assert [(line.kind, line.amount_cents) for line in feed] == [("Sale", 1599), ("Loss", -1750), ("Sale", 3198)]
        assert feed[1].item_name == "Tomatoes"
        assert feed[1].organization_name == "Downtown Branch"

    def test_organization_and_kind(self, db_session, org_a, org_b, pizza, record_sale, record_loss):
        record_sale(org_a, pizza, 1, sale_date=MAR_01)
        record_sale(org_b, pizza, 1, sale_date=MAR_02)
        record_loss(org_a, menu_item=pizza, loss_date=MAR_03)

        feed = get_transaction_feed(FeedFilter(organization_id=org_a.id, kind="sales"))

        assert len(feed) == 1
        assert feed[0].kind == "Sale"
        assert feed[0].date == MAR_01

    def test_deleted_stock_item_shows_unknown(self, db_session, org_a, tomatoes, record_loss):
        record_loss(org_a, stock_item=tomatoes, quantity=1, loss_date=MAR_01)
        stock_service.delete_stock_item(tomatoes.id)

        feed = get_transaction_feed()

        assert len(feed) == 1
        assert feed[0].item_name == UNKNOWN_ITEM
        assert feed[0].amount_cents == -350
