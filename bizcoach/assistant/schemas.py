"""Pydantic schemas for assistant results."""
import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from bizcoach.data.records import SaleStatus


# =============================================================================
# Enums
# =============================================================================

class RiskLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderPriority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Severity(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnomalyKind(str, enum.Enum):
    UNUSUAL_AMOUNT = "unusual_amount"
    DUPLICATE = "duplicate"
    HIGH_CREDIT = "high_credit"


class InsightType(str, enum.Enum):
    """Tone of an insight card."""
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"
    TIP = "tip"


class InsightCategory(str, enum.Enum):
    """Which observation produced the insight."""
    CREDIT_TOTAL = "credit_total"
    ACTIVE_CREDITS = "active_credits"
    MONTHLY_TARGET = "monthly_target"
    BEST_WEEKDAY = "best_weekday"
    VIP_CLIENTS = "vip_clients"
    CREDIT_SHARE = "credit_share"
    GROWTH = "growth"
    DECLINE = "decline"


class ForecastConfidence(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SalesTrend(str, enum.Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class VipTier(str, enum.Enum):
    """Loyalty tiers, highest first."""
    PLATINE = "platine"
    OR = "or"
    ARGENT = "argent"
    BRONZE = "bronze"
    STANDARD = "standard"


class OpportunityType(str, enum.Enum):
    WIN_BACK = "win_back"
    THANK_YOU = "thank_you"


class WarningType(str, enum.Enum):
    CASH_FLOW = "cash_flow"
    CLIENT_LOSS = "client_loss"
    LOW_SALES = "low_sales"


class ClientReliability(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    UNKNOWN = "unknown"


# =============================================================================
# Risk & Reminders
# =============================================================================

class RiskScore(BaseModel):
    """Credit risk for a client that currently owes money."""
    client_id: str
    client_name: str
    score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    reasons: List[str]
    recommendation: str


class ReminderSuggestion(BaseModel):
    """Suggested collection contact for one client."""
    client_id: str
    client_name: str
    phone: str
    amount_due: float
    priority: ReminderPriority
    best_time_to_contact: str
    message: str
    days_since_oldest_unpaid: int


# =============================================================================
# Anomalies
# =============================================================================

class ProposedSale(BaseModel):
    """A sale about to be recorded, checked before saving."""
    client_id: str
    total: float = Field(ge=0)
    status: SaleStatus


class AnomalyFlag(BaseModel):
    kind: AnomalyKind
    severity: Severity
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Insights
# =============================================================================

class Insight(BaseModel):
    type: InsightType
    category: InsightCategory
    title: str
    message: str
    action: Optional[str] = None
    priority: int


# =============================================================================
# Forecast
# =============================================================================

class CurrentMonthSales(BaseModel):
    total: float
    sales_count: int
    days_elapsed: int
    days_remaining: int


class ForecastPrediction(BaseModel):
    daily_average: float
    estimated_total: float
    confidence: ForecastConfidence
    growth_vs_last_month: float  # Percentage
    message: str


class SalesForecast(BaseModel):
    current_month: CurrentMonthSales
    prediction: ForecastPrediction
    last_month_total: float
    trend: SalesTrend
    recommendation: str


# =============================================================================
# VIP
# =============================================================================

class VipComponents(BaseModel):
    """Points per criterion; each is capped independently."""
    spend: float = Field(ge=0, le=40)
    frequency: float = Field(ge=0, le=30)
    recency: float = Field(ge=0, le=20)
    basket: float = Field(ge=0, le=10)

    @property
    def total(self) -> float:
        return self.spend + self.frequency + self.recency + self.basket


class VipScore(BaseModel):
    client_id: str
    client_name: str
    tier: VipTier
    score: float = Field(ge=0, le=100)
    components: VipComponents
    total_spent: float
    nb_purchases: int
    avg_purchase: float
    last_purchase_days: int
    benefits: List[str]
    next_tier_score: Optional[int] = None
    next_tier_name: Optional[str] = None


# =============================================================================
# Coaching
# =============================================================================

class DailyTip(BaseModel):
    emoji: str
    title: str
    message: str
    actionable: bool


class WeeklySummary(BaseModel):
    best_day: Optional[str] = None
    worst_day: Optional[str] = None
    top_client: Optional[str] = None
    week_total: float = 0


class Opportunity(BaseModel):
    type: OpportunityType
    client_id: str
    client_name: str
    message: str
    priority: int


class CoachingWarning(BaseModel):
    type: WarningType
    message: str
    severity: Severity


class BusinessCoaching(BaseModel):
    daily_tip: DailyTip
    weekly_summary: WeeklySummary
    opportunities: List[Opportunity]
    warnings: List[CoachingWarning]


# =============================================================================
# Client behaviour
# =============================================================================

class ClientBehavior(BaseModel):
    client_id: str
    reliability: ClientReliability
    message: str
    payment_rate: Optional[int] = None  # Percentage of fully paid sales
    nb_sales: int = 0
    nb_credits: int = 0
    nb_paid: int = 0


# =============================================================================
# Overdue scan
# =============================================================================

class ReminderScanResult(BaseModel):
    """Outcome of one automatic overdue-credit pass."""
    created: int
    skipped_existing: int
    failed: int
    reminder_ids: List[str]
