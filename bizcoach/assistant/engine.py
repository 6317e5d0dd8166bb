"""
Assistant Engine - single entry point for every heuristic.

Each operation reads fresh snapshots through the DataGateway, runs one of the
scorers and returns pydantic results. Nothing is cached or persisted, except
reminders written by the overdue scan.
"""
import asyncio
import inspect
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Union

from bizcoach.assistant.anomalies import detect_anomalies
from bizcoach.assistant.behavior import analyze_client_behavior
from bizcoach.assistant.coaching import build_business_coaching
from bizcoach.assistant.exceptions import ClientNotFoundError, GatewayNotConfiguredError
from bizcoach.assistant.forecast import calculate_sales_forecast
from bizcoach.assistant.insights import generate_business_insights
from bizcoach.assistant.reminders import build_reminder_suggestions, create_overdue_reminders
from bizcoach.assistant.risk_scoring import calculate_credit_risk_scores
from bizcoach.assistant.schemas import (
    AnomalyFlag,
    BusinessCoaching,
    ClientBehavior,
    Insight,
    ProposedSale,
    ReminderScanResult,
    ReminderSuggestion,
    RiskScore,
    SalesForecast,
    VipScore,
)
from bizcoach.assistant.vip import calculate_vip_scores
from bizcoach.config import Settings, settings as default_settings
from bizcoach.data.gateway import DataGateway

logger = logging.getLogger(__name__)


GatewayFactory = Callable[[], Union[DataGateway, Awaitable[DataGateway]]]


class AssistantEngine:
    """
    Local business assistant.

    The gateway is either handed over directly or built on first use by
    `gateway_factory` (sync or async). Concurrent first calls share a single
    factory invocation.

    Engines that share a store must share `scan_lock`, otherwise two overdue
    scans can both write a reminder for the same sale.
    """

    def __init__(
        self,
        gateway: Optional[DataGateway] = None,
        gateway_factory: Optional[GatewayFactory] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
        scan_lock: Optional[asyncio.Lock] = None,
    ):
        if gateway is None and gateway_factory is None:
            raise GatewayNotConfiguredError(
                "AssistantEngine needs a gateway or a gateway_factory"
            )
        self._gateway = gateway
        self._gateway_factory = gateway_factory
        self.settings = settings or default_settings
        self._clock = clock or datetime.now
        self._gateway_lock = asyncio.Lock()
        self._scan_lock = scan_lock or asyncio.Lock()

    async def _get_gateway(self) -> DataGateway:
        if self._gateway is not None:
            return self._gateway

        async with self._gateway_lock:
            if self._gateway is None:
                gateway = self._gateway_factory()
                if inspect.isawaitable(gateway):
                    gateway = await gateway
                self._gateway = gateway
                logger.debug("Assistant gateway initialised")
        return self._gateway

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or self._clock()

    # =========================================================================
    # Credit
    # =========================================================================

    async def calculate_credit_risk_scores(self, now: Optional[datetime] = None) -> List[RiskScore]:
        gateway = await self._get_gateway()
        clients = await gateway.list_clients()
        sales = await gateway.list_sales()
        payments = await gateway.list_payments()

        scores = calculate_credit_risk_scores(
            clients,
            sales,
            payments,
            self._now(now),
            delinquency_days=self.settings.DELINQUENCY_DAYS,
        )
        logger.info(f"Computed {len(scores)} credit risk scores")
        return scores

    async def get_smart_reminders(self, now: Optional[datetime] = None) -> List[ReminderSuggestion]:
        gateway = await self._get_gateway()
        clients = await gateway.list_clients()
        sales = await gateway.list_sales()
        payments = await gateway.list_payments()

        suggestions = build_reminder_suggestions(clients, sales, payments, self._now(now))
        logger.info(f"Suggested {len(suggestions)} reminders")
        return suggestions

    async def create_overdue_reminders(self, now: Optional[datetime] = None) -> ReminderScanResult:
        """
        Persist reminders for overdue credit sales.

        Scans are serialised so two concurrent calls cannot both write a
        reminder for the same sale.
        """
        gateway = await self._get_gateway()
        async with self._scan_lock:
            result = await create_overdue_reminders(
                gateway,
                self._now(now),
                overdue_days=self.settings.OVERDUE_REMINDER_DAYS,
                due_in_days=self.settings.REMINDER_DUE_IN_DAYS,
            )
        logger.info(
            f"Overdue scan: {result.created} created, "
            f"{result.skipped_existing} already covered, {result.failed} failed"
        )
        return result

    # =========================================================================
    # Sales checks & analytics
    # =========================================================================

    async def detect_anomalies(
        self, proposed: ProposedSale, now: Optional[datetime] = None
    ) -> List[AnomalyFlag]:
        gateway = await self._get_gateway()
        sales = await gateway.list_sales()
        client = await gateway.get_client(proposed.client_id)

        flags = detect_anomalies(
            proposed,
            sales,
            client,
            self._now(now),
            duplicate_window_seconds=self.settings.DUPLICATE_SALE_WINDOW_SECONDS,
        )
        if flags:
            logger.info(f"Sale for client {proposed.client_id} raised {len(flags)} anomaly flag(s)")
        return flags

    async def get_business_insights(self, now: Optional[datetime] = None) -> List[Insight]:
        gateway = await self._get_gateway()
        clients = await gateway.list_clients()
        sales = await gateway.list_sales()
        payments = await gateway.list_payments()

        return generate_business_insights(
            clients,
            sales,
            payments,
            self._now(now),
            monthly_target=self.settings.MONTHLY_SALES_TARGET,
        )

    async def get_sales_forecast(self, now: Optional[datetime] = None) -> SalesForecast:
        gateway = await self._get_gateway()
        sales = await gateway.list_sales()
        return calculate_sales_forecast(sales, self._now(now))

    async def get_vip_scores(self, now: Optional[datetime] = None) -> List[VipScore]:
        gateway = await self._get_gateway()
        clients = await gateway.list_clients()
        sales = await gateway.list_sales()
        return calculate_vip_scores(clients, sales, self._now(now))

    async def get_business_coaching(self, now: Optional[datetime] = None) -> BusinessCoaching:
        gateway = await self._get_gateway()
        clients = await gateway.list_clients()
        sales = await gateway.list_sales()
        payments = await gateway.list_payments()
        return build_business_coaching(clients, sales, payments, self._now(now))

    async def analyze_client_behavior(self, client_id: str) -> ClientBehavior:
        gateway = await self._get_gateway()
        client = await gateway.get_client(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)

        sales = await gateway.list_sales()
        payments = await gateway.list_payments()
        return analyze_client_behavior(client_id, sales, payments)
