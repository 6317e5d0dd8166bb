"""
Tests for reminder suggestions and the overdue reminder scan.
"""

from datetime import timedelta

import pytest

from bizcoach.assistant.reminders import (
    PRIORITY_ORDER,
    best_time_to_contact,
    build_reminder_suggestions,
    create_overdue_reminders,
    draft_reminder_message,
    priority_for,
)
from bizcoach.assistant.schemas import ReminderPriority
from bizcoach.data.records import ReminderRecord, SaleStatus

from factories import NOW, InMemoryGateway, make_client, make_payment, make_sale


# =============================================================================
# Helpers
# =============================================================================

class TestPriority:

    @pytest.mark.parametrize("days,amount,expected", [
        (31, 1000, ReminderPriority.HIGH),
        (2, 50001, ReminderPriority.HIGH),
        (15, 1000, ReminderPriority.MEDIUM),
        (2, 20001, ReminderPriority.MEDIUM),
        (14, 20000, ReminderPriority.LOW),
        (30, 50000, ReminderPriority.MEDIUM),
    ])
    def test_priority_bands(self, days, amount, expected):
        assert priority_for(days, amount) == expected

    def test_every_priority_is_ranked(self):
        assert set(PRIORITY_ORDER) == set(ReminderPriority)


class TestContactWindow:

    @pytest.mark.parametrize("hour,expected", [
        (7, "Ce matin (9h-12h)"),
        (9, "Cet après-midi (14h-17h)"),
        (13, "Cet après-midi (14h-17h)"),
        (14, "En fin de journée (17h-19h)"),
        (17, "En fin de journée (17h-19h)"),
        (18, "Demain matin (9h-12h)"),
        (23, "Demain matin (9h-12h)"),
    ])
    def test_windows(self, hour, expected):
        assert best_time_to_contact(hour) == expected


class TestMessageDrafting:

    def test_message_is_personalised(self):
        message = draft_reminder_message("Awa", 15000, 3)

        assert message.startswith("Bonjour Awa !")
        assert "15\u202f000 CFA" in message

    @pytest.mark.parametrize("days,marker", [
        (0, "Je me permets de vous rappeler"),
        (7, "Pouvez-vous me faire un paiement bientôt ?"),
        (20, "en attente depuis un moment"),
        (30, "Je me permets de vous relancer"),
    ])
    def test_tone_bands(self, days, marker):
        assert marker in draft_reminder_message("Awa", 5000, days)


# =============================================================================
# Suggestions
# =============================================================================

class TestBuildReminderSuggestions:

    def test_skips_clients_without_phone_or_balance(self):
        clients = [
            make_client("no_phone", phone=None),
            make_client("blank_phone", phone="   "),
            make_client("paid_up"),
            make_client("owes"),
        ]
        sales = [
            make_sale("s1", client_id="no_phone", total=9000, status=SaleStatus.CREDIT, days_ago=10),
            make_sale("s2", client_id="blank_phone", total=9000, status=SaleStatus.CREDIT, days_ago=10),
            make_sale("s3", client_id="paid_up", total=9000, status=SaleStatus.CREDIT, days_ago=10),
            make_sale("s4", client_id="owes", total=9000, status=SaleStatus.CREDIT, days_ago=10),
        ]
        payments = [make_payment("p1", "s3", 9000)]

        suggestions = build_reminder_suggestions(clients, sales, payments, NOW)

        assert [s.client_id for s in suggestions] == ["owes"]
        assert suggestions[0].amount_due == 9000
        assert suggestions[0].phone == "+221770000001"

    def test_days_measured_from_oldest_unpaid_sale(self):
        sales = [
            make_sale("settled", total=5000, status=SaleStatus.CREDIT, days_ago=60),
            make_sale("open_old", total=5000, status=SaleStatus.PARTIAL, amount_paid=1000, days_ago=20),
            make_sale("open_new", total=5000, status=SaleStatus.CREDIT, days_ago=3),
        ]
        payments = [make_payment("p1", "settled", 5000)]

        suggestion = build_reminder_suggestions([make_client()], sales, payments, NOW)[0]

        assert suggestion.days_since_oldest_unpaid == 20
        assert suggestion.amount_due == 9000
        assert suggestion.priority == ReminderPriority.MEDIUM
        assert suggestion.best_time_to_contact == "En fin de journée (17h-19h)"

    def test_ordered_by_priority_then_amount(self):
        clients = [
            make_client("low"),
            make_client("medium_small"),
            make_client("high"),
            make_client("medium_big"),
        ]
        sales = [
            make_sale("s1", client_id="low", total=1000, status=SaleStatus.CREDIT, days_ago=1),
            make_sale("s2", client_id="medium_small", total=21000, status=SaleStatus.CREDIT, days_ago=1),
            make_sale("s3", client_id="high", total=1000, status=SaleStatus.CREDIT, days_ago=45),
            make_sale("s4", client_id="medium_big", total=30000, status=SaleStatus.CREDIT, days_ago=1),
        ]

        suggestions = build_reminder_suggestions(clients, sales, [], NOW)

        assert [s.client_id for s in suggestions] == ["high", "medium_big", "medium_small", "low"]


# =============================================================================
# Overdue scan
# =============================================================================

class TestOverdueScan:

    @pytest.fixture
    def overdue_gateway(self):
        return InMemoryGateway(
            clients=[make_client()],
            sales=[
                make_sale("overdue", total=15000, status=SaleStatus.CREDIT, days_ago=10),
                make_sale("recent", total=8000, status=SaleStatus.CREDIT, days_ago=5),
                make_sale("cash", total=8000, days_ago=30),
            ],
        )

    @pytest.mark.asyncio
    async def test_creates_reminder_for_overdue_credit(self, overdue_gateway):
        result = await create_overdue_reminders(overdue_gateway, NOW)

        assert result.created == 1
        assert result.reminder_ids == ["rem_1"]
        reminder = overdue_gateway.reminders[0]
        assert reminder.sale_id == "overdue"
        assert reminder.client_id == "client_1"
        assert reminder.message == "Crédit en retard de 15\u202f000 CFA pour Awa Diop"
        assert reminder.due_date == NOW + timedelta(days=3)
        assert reminder.resolved is False

    @pytest.mark.asyncio
    async def test_second_scan_creates_nothing(self, overdue_gateway):
        await create_overdue_reminders(overdue_gateway, NOW)
        result = await create_overdue_reminders(overdue_gateway, NOW)

        assert result.created == 0
        assert result.skipped_existing == 1
        unresolved = [r for r in overdue_gateway.reminders if not r.resolved]
        assert len(unresolved) == 1

    @pytest.mark.asyncio
    async def test_resolved_reminder_does_not_block_new_one(self, overdue_gateway):
        overdue_gateway.reminders.append(ReminderRecord(
            id="rem_old",
            client_id="client_1",
            sale_id="overdue",
            message="old",
            due_date=NOW - timedelta(days=1),
            resolved=True,
        ))

        result = await create_overdue_reminders(overdue_gateway, NOW)

        assert result.created == 1

    @pytest.mark.asyncio
    async def test_remaining_balance_accounts_for_payments(self, overdue_gateway):
        overdue_gateway.payments.append(make_payment("p1", "overdue", 5000))

        await create_overdue_reminders(overdue_gateway, NOW)

        assert "10\u202f000 CFA" in overdue_gateway.reminders[0].message

    @pytest.mark.asyncio
    async def test_unknown_client_is_skipped(self):
        gateway = InMemoryGateway(
            clients=[],
            sales=[make_sale("orphan", client_id="ghost", status=SaleStatus.CREDIT, days_ago=20)],
        )

        result = await create_overdue_reminders(gateway, NOW)

        assert result.created == 0
        assert gateway.reminders == []

    @pytest.mark.asyncio
    async def test_failed_write_is_logged_and_scan_continues(self, caplog):
        class FlakyGateway(InMemoryGateway):
            async def create_reminder(self, reminder):
                if reminder.sale_id == "first":
                    raise RuntimeError("disk full")
                return await super().create_reminder(reminder)

        gateway = FlakyGateway(
            clients=[make_client()],
            sales=[
                make_sale("first", status=SaleStatus.CREDIT, days_ago=20),
                make_sale("second", status=SaleStatus.CREDIT, days_ago=15),
            ],
        )

        result = await create_overdue_reminders(gateway, NOW)

        assert result.failed == 1
        assert result.created == 1
        assert gateway.reminders[0].sale_id == "second"
        assert "disk full" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_thresholds(self, overdue_gateway):
        result = await create_overdue_reminders(overdue_gateway, NOW, overdue_days=3, due_in_days=1)

        assert result.created == 2
        assert all(r.due_date == NOW + timedelta(days=1) for r in overdue_gateway.reminders)
