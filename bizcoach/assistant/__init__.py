# Assistant Module
# Local business heuristics computed from the shop's own records
#
# Components:
# - engine.py: AssistantEngine facade over a DataGateway
# - risk_scoring.py: Credit risk per client
# - reminders.py: Collection suggestions and overdue reminder scan
# - anomalies.py: Checks on a sale before it is recorded
# - insights.py: Dashboard insight cards
# - forecast.py: End-of-month sales projection
# - vip.py: Loyalty tiers
# - coaching.py: Daily tip, weekly summary, opportunities, warnings
# - behavior.py: Payment reliability of one client
# - rules.py / ledger.py: Shared rule reducer and ledger helpers

from .engine import AssistantEngine
from .exceptions import AssistantError, GatewayNotConfiguredError, ClientNotFoundError
from .schemas import (
    RiskLevel,
    ReminderPriority,
    Severity,
    AnomalyKind,
    InsightType,
    InsightCategory,
    ForecastConfidence,
    SalesTrend,
    VipTier,
    OpportunityType,
    WarningType,
    ClientReliability,
    RiskScore,
    ReminderSuggestion,
    ReminderScanResult,
    ProposedSale,
    AnomalyFlag,
    Insight,
    SalesForecast,
    VipScore,
    BusinessCoaching,
    ClientBehavior,
)

__all__ = [
    "AssistantEngine",
    "AssistantError",
    "GatewayNotConfiguredError",
    "ClientNotFoundError",
    "RiskLevel",
    "ReminderPriority",
    "Severity",
    "AnomalyKind",
    "InsightType",
    "InsightCategory",
    "ForecastConfidence",
    "SalesTrend",
    "VipTier",
    "OpportunityType",
    "WarningType",
    "ClientReliability",
    "RiskScore",
    "ReminderSuggestion",
    "ReminderScanResult",
    "ProposedSale",
    "AnomalyFlag",
    "Insight",
    "SalesForecast",
    "VipScore",
    "BusinessCoaching",
    "ClientBehavior",
]
