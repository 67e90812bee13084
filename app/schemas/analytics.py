"""Dashboard and analytics schemas"""

from datetime import datetime
from typing import List
from pydantic import BaseModel


class DashboardStats(BaseModel):
    today_reservations: int
    monthly_reservations: int
    monthly_revenue: int
    total_customers: int


class DailyCount(BaseModel):
    date: str
    count: int


class WeeklyCount(BaseModel):
    week_start: str
    count: int


class MonthlyCount(BaseModel):
    month: str
    count: int


class MonthRepeat(BaseModel):
    month: str
    total_customers: int
    new_customers: int
    repeat_customers: int
    repeat_rate: int


class AnalyticsReport(BaseModel):
    daily: List[DailyCount]
    weekly: List[WeeklyCount]
    monthly: List[MonthlyCount]
    repeat_rate: MonthRepeat
    repeat_trend: List[MonthRepeat]


class VisitDistribution(BaseModel):
    once: int
    twice: int
    three_times: int
    four_or_more: int


class RepeatRateReport(BaseModel):
    total_customers: int
    repeat_customers: int
    repeat_rate: int
    distribution: VisitDistribution


class ReminderRunResponse(BaseModel):
    sent: int
    success: int
    failure: int
    errors: List[dict]
    timestamp: datetime

    class Config:
        from_attributes = True
