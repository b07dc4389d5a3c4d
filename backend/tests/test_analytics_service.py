# Overview: Pytest coverage for summary filtering and reduction.

from datetime import datetime
from types import SimpleNamespace

import pytest

from restoledger.services.analytics_service import (
    Summary,
    SummaryFilter,
    build_summary_filter,
    get_summary,
    summarize,
)
from restoledger.validation import ValidationError


JAN_05 = datetime(2024, 1, 5, 12, 0)
JAN_20 = datetime(2024, 1, 20, 12, 0)
FEB_10 = datetime(2024, 2, 10, 12, 0)


def _sale(revenue, cost, org=1, created_at=JAN_05):
    return SimpleNamespace(
        organization_id=org,
        created_at=created_at,
        total_revenue_cents=revenue,
        total_cost_cents=cost,
        profit_cents=revenue - cost,
    )


def _loss(amount, org=1, created_at=JAN_05):
    return SimpleNamespace(organization_id=org, created_at=created_at, total_loss_cents=amount)


class TestSummarize:
    def test_empty_input_is_all_zero(self):
        summary = summarize([], [])
        assert summary == Summary()
        assert summary.to_dict() == {
            "total_revenue_cents": 0,
            "total_cost_cents": 0,
            "total_profit_cents": 0,
            "total_loss_cents": 0,
            "net_profit_cents": 0,
            "sales_count": 0,
            "loss_count": 0,
        }

    def test_sums_and_net_profit(self):
        summary = summarize([_sale(3198, 1700), _sale(299, 125)], [_loss(4797)])

        assert summary.total_revenue_cents == 3497
        assert summary.total_cost_cents == 1825
        assert summary.total_profit_cents == 1672
        assert summary.total_loss_cents == 4797
        assert summary.net_profit_cents == 1672 - 4797
        assert summary.sales_count == 2
        assert summary.loss_count == 1

    def test_additive_over_disjoint_sets(self):
        sales_a = [_sale(1000, 400), _sale(250, 300)]
        sales_b = [_sale(1599, 850)]
        losses_a = [_loss(700)]
        losses_b = [_loss(1750), _loss(4797)]

        combined = summarize(sales_a + sales_b, losses_a + losses_b)
        assert combined == summarize(sales_a, losses_a) + summarize(sales_b, losses_b)
        assert combined.net_profit_cents == (
            summarize(sales_a, losses_a).net_profit_cents + summarize(sales_b, losses_b).net_profit_cents
        )


class TestSummaryFilter:
    @pytest.mark.parametrize("start,end", [(FEB_10, None), (None, JAN_05)])
    def test_single_bound_has_no_date_range(self, start, end):
        assert not SummaryFilter(start=start, end=end).has_date_range

    def test_build_parses_iso_strings(self):
        f = build_summary_filter(organization_id=3, start="2024-01-01", end="2024-01-31T23:59:59Z")
        assert f == SummaryFilter(organization_id=3, start=datetime(2024, 1, 1), end=datetime(2024, 1, 31, 23, 59, 59))

    def test_build_treats_blank_as_absent(self):
        assert build_summary_filter(start="", end="") == SummaryFilter()

    def test_build_rejects_garbage_dates(self):
        with pytest.raises(ValidationError):
            build_summary_filter(start="last tuesday", end="2024-01-31")


class TestGetSummary:
    def test_empty_store(self, db_session):
        assert get_summary() == Summary()

    def test_organization_filter_ignores_dates(self, db_session, org_a, org_b, pizza, cola, tomatoes,
                                                record_sale, record_loss):
        record_sale(org_a, pizza, 2, created_at=JAN_05)
        record_sale(org_a, cola, 1, created_at=FEB_10)
        record_sale(org_b, pizza, 5, created_at=JAN_20)
        record_loss(org_a, stock_item=tomatoes, quantity=5, created_at=JAN_20)
        record_loss(org_b, menu_item=pizza, quantity=3, created_at=JAN_05)

        summary = get_summary(SummaryFilter(organization_id=org_a.id))

        assert summary.total_revenue_cents == 3198 + 299
        assert summary.total_cost_cents == 1700 + 125
        assert summary.total_profit_cents == 1498 + 174
        assert summary.total_loss_cents == 1750
        assert summary.net_profit_cents == 1498 + 174 - 1750
        assert summary.sales_count == 2
        assert summary.loss_count == 1

    def test_date_range_uses_created_at(self, db_session, org_a, pizza, record_sale, record_loss):
        # sale_date inside the range but created later: not counted
        record_sale(org_a, pizza, 1, sale_date=JAN_05, created_at=FEB_10)
        record_sale(org_a, pizza, 2, sale_date=FEB_10, created_at=JAN_20)
        record_loss(org_a, menu_item=pizza, quantity=1, created_at=JAN_05)

        summary = get_summary(SummaryFilter(start=JAN_05, end=JAN_20))

        assert summary.sales_count == 1
        assert summary.total_revenue_cents == 3198
        assert summary.loss_count == 1
        assert summary.total_loss_cents == 1599

    def test_range_includes_both_endpoints(self, db_session, org_a, pizza, cola, record_sale, record_loss):
        record_sale(org_a, pizza, 1, created_at=JAN_05)
        record_sale(org_a, cola, 1, created_at=JAN_20)
        record_sale(org_a, cola, 3, created_at=FEB_10)
        record_loss(org_a, menu_item=cola, quantity=1, created_at=JAN_20)
        record_loss(org_a, menu_item=pizza, quantity=1, created_at=FEB_10)

        summary = get_summary(SummaryFilter(start=JAN_05, end=JAN_20))

        assert summary.sales_count == 2
        assert summary.total_revenue_cents == 1599 + 299
        assert summary.loss_count == 1
        assert summary.total_loss_cents == 299

    def test_organization_filter_excludes_other_branch(self, db_session, org_a, org_b, pizza, record_sale):
        record_sale(org_a, pizza, 1)
        record_sale(org_b, pizza, 4)

        summary = get_summary(SummaryFilter(organization_id=org_b.id))

        assert summary.sales_count == 1
        assert summary.total_revenue_cents == 4 * 1599

    @pytest.mark.parametrize("bound", ["start", "end"])
    def test_single_bound_counts_everything(self, db_session, org_a, pizza, record_sale, bound):
        record_sale(org_a, pizza, 1, created_at=JAN_05)
        record_sale(org_a, pizza, 1, created_at=FEB_10)

        # Either lone bound would exclude one sale if it were applied
        lone = SummaryFilter(start=JAN_20) if bound == "start" else SummaryFilter(end=JAN_20)

        assert get_summary(lone).sales_count == 2

    def test_start_only_equals_unfiltered(self, db_session, org_a, pizza, record_sale, record_loss):
        record_sale(org_a, pizza, 1, created_at=JAN_05)
        record_sale(org_a, pizza, 1, created_at=FEB_10)
        record_loss(org_a, menu_item=pizza, quantity=1, created_at=JAN_05)

        assert get_summary(SummaryFilter(start=FEB_10)) == get_summary(SummaryFilter())
        assert get_summary(SummaryFilter(end=JAN_05)) == get_summary(SummaryFilter())

    def test_is_read_only(self, db_session, org_a, pizza, record_sale):
        sale = record_sale(org_a, pizza, 2)
        before = sale.to_dict()

        get_summary(SummaryFilter(organization_id=org_a.id))

        db_session.refresh(sale)
        assert sale.to_dict() == before
