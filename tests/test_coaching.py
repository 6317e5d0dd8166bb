"""
Tests for business coaching: tip rotation, weekly summary, opportunities
and warnings.
"""

from datetime import datetime, timedelta

from bizcoach.assistant.coaching import (
    DAILY_TIPS,
    MAX_OPPORTUNITIES,
    OPPORTUNITY_PRIORITIES,
    SEVERITY_RANK,
    build_business_coaching,
    daily_tip,
    find_opportunities,
    find_warnings,
    weekly_summary,
)
from bizcoach.assistant.schemas import OpportunityType, Severity, WarningType
from bizcoach.data.records import SaleStatus

from factories import NOW, make_client, make_payment, make_sale


class TestDailyTip:

    def test_rotation_follows_weekday(self):
        # NOW is a Sunday
        assert daily_tip(NOW) == DAILY_TIPS[0]
        assert daily_tip(NOW + timedelta(days=1)) == DAILY_TIPS[1]
        assert daily_tip(NOW + timedelta(days=6)) == DAILY_TIPS[6]
        assert daily_tip(NOW + timedelta(days=7)) == DAILY_TIPS[0]

    def test_seven_tips(self):
        assert len(DAILY_TIPS) == 7


class TestWeeklySummary:

    def test_empty_week(self):
        summary = weekly_summary([make_client()], [make_sale("old", days_ago=10)], NOW)

        assert summary.best_day is None
        assert summary.worst_day is None
        assert summary.top_client is None
        assert summary.week_total == 0

    def test_best_and_worst_day_and_top_client(self):
        clients = [make_client("a", first_name="Awa"), make_client("b", first_name="Moussa", last_name="Sow")]
        sales = [
            # Thursday 17th and Friday 18th
            make_sale("s1", client_id="a", total=5000, days_ago=3),
            make_sale("s2", client_id="b", total=20000, days_ago=2),
            make_sale("s3", client_id="a", total=4000, days_ago=2),
        ]

        summary = weekly_summary(clients, sales, NOW)

        assert summary.best_day == "Vendredi"
        assert summary.worst_day == "Jeudi"
        assert summary.top_client == "Moussa Sow"
        assert summary.week_total == 29000


class TestOpportunities:

    def test_win_back_regular_client(self):
        sales = [make_sale(f"s{i}", total=1000, days_ago=45 + i) for i in range(3)]

        opportunities = find_opportunities([make_client()], sales, NOW)

        assert len(opportunities) == 1
        assert opportunities[0].type == OpportunityType.WIN_BACK
        assert opportunities[0].priority == 85
        assert "45 jours" in opportunities[0].message

    def test_win_back_needs_three_sales_and_thirty_to_sixty_days(self):
        clients = [make_client("few"), make_client("gone"), make_client("active")]
        sales = [
            make_sale("f1", client_id="few", days_ago=40),
            make_sale("f2", client_id="few", days_ago=41),
        ]
        sales += [make_sale(f"g{i}", client_id="gone", days_ago=61 + i) for i in range(3)]
        sales += [make_sale(f"a{i}", client_id="active", days_ago=29 + i) for i in range(3)]

        assert find_opportunities(clients, sales, NOW) == []

    def test_thank_you_top_three_big_spenders(self):
        clients = [make_client(f"c{i}", first_name=f"Client{i}") for i in range(5)]
        spends = [150000, 400000, 90000, 250000, 120000]
        sales = [
            make_sale(f"s{i}", client_id=f"c{i}", total=spend, days_ago=2)
            for i, spend in enumerate(spends)
        ]

        opportunities = find_opportunities(clients, sales, NOW)

        assert [o.client_id for o in opportunities] == ["c1", "c3", "c0"]
        assert all(o.type == OpportunityType.THANK_YOU for o in opportunities)
        assert all(o.priority == 70 for o in opportunities)

    def test_win_back_ranks_before_thank_you_and_list_is_capped(self):
        clients = [make_client(f"w{i}") for i in range(4)] + [make_client(f"v{i}") for i in range(3)]
        sales = []
        for i in range(4):
            sales += [make_sale(f"w{i}_{j}", client_id=f"w{i}", total=1000, days_ago=35 + j) for j in range(3)]
        for i in range(3):
            sales.append(make_sale(f"v{i}", client_id=f"v{i}", total=200000 + i, days_ago=1))

        opportunities = find_opportunities(clients, sales, NOW)

        assert len(opportunities) == MAX_OPPORTUNITIES
        assert [o.type for o in opportunities] == [OpportunityType.WIN_BACK] * 4 + [OpportunityType.THANK_YOU]
        assert opportunities[-1].client_id == "v2"

    def test_every_opportunity_type_has_a_priority(self):
        assert set(OPPORTUNITY_PRIORITIES) == set(OpportunityType)


class TestWarnings:

    def test_cash_flow_bands(self):
        high = [make_sale("c1", total=120000, status=SaleStatus.CREDIT, days_ago=5)]
        medium = [make_sale("c1", total=60000, status=SaleStatus.CREDIT, days_ago=5)]

        assert [(w.type, w.severity) for w in find_warnings(high, [], NOW)] == [
            (WarningType.CASH_FLOW, Severity.HIGH)
        ]
        assert [(w.type, w.severity) for w in find_warnings(medium, [], NOW)] == [
            (WarningType.CASH_FLOW, Severity.MEDIUM)
        ]

    def test_payments_reduce_cash_flow_exposure(self):
        sales = [make_sale("c1", total=60000, status=SaleStatus.CREDIT, days_ago=5)]
        payments = [make_payment("p1", "c1", 20000)]

        assert find_warnings(sales, payments, NOW) == []

    def test_sales_drop_and_client_loss_ranked_by_severity(self):
        sales = [
            make_sale("prev_a", client_id="a", total=40000, days_ago=45),
            make_sale("prev_b", client_id="b", total=30000, days_ago=40),
            make_sale("prev_c", client_id="c", total=30000, days_ago=50),
            make_sale("recent_d", client_id="d", total=10000, days_ago=5),
        ]

        warnings = find_warnings(sales, [], NOW)

        assert [w.type for w in warnings] == [WarningType.LOW_SALES, WarningType.CLIENT_LOSS]
        assert warnings[0].severity == Severity.HIGH
        assert warnings[0].message.startswith("Baisse de 90%")
        assert warnings[1].message.startswith("3 clients")

    def test_medium_cash_flow_ranks_after_high_sales_drop(self):
        sales = [
            make_sale("prev", client_id="a", total=200000, days_ago=45),
            make_sale("credit", client_id="b", total=60000, status=SaleStatus.CREDIT, days_ago=5),
        ]

        warnings = find_warnings(sales, [], NOW)

        assert [w.type for w in warnings] == [WarningType.LOW_SALES, WarningType.CASH_FLOW]

    def test_every_severity_is_ranked(self):
        assert set(SEVERITY_RANK) == set(Severity)


class TestBuildBusinessCoaching:

    def test_combines_sections(self):
        coaching = build_business_coaching([make_client()], [], [], datetime(2026, 9, 22, 8))

        assert coaching.daily_tip == DAILY_TIPS[2]
        assert coaching.weekly_summary.best_day is None
        assert coaching.opportunities == []
        assert coaching.warnings == []
