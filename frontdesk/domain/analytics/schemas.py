"""Analytics schemas"""

from datetime import datetime
from typing import Optional

from ...schemas import CamelModel


class DateRangeInput(CamelModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class TopVisitor(CamelModel):
    name: str
    email: str
    company: str
    count: int


class NamedCount(CamelModel):
    name: str
    count: int


class CompanyCount(CamelModel):
    company: str
    count: int


class VisitorTypeCount(CamelModel):
    type: str
    count: int


class OverviewMetrics(CamelModel):
    total_visits: int = 0
    avg_visit_duration: int = 0
    peak_check_in_hour: int = 0
    peak_check_in_count: int = 0
    top_visitors: list[TopVisitor] = []
    top_companies: list[CompanyCount] = []


class VisitorAnalytics(CamelModel):
    visitor_types: list[VisitorTypeCount] = []
    total_visitors: int = 0
    repeat_visitors: int = 0
    new_visitors: int = 0
    most_visited_employees: list[NamedCount] = []
    top_origins: list[CompanyCount] = []


class HourCount(CamelModel):
    hour: int
    label: str
    count: int


class DayCount(CamelModel):
    day: str
    count: int


class DateCount(CamelModel):
    date: str
    count: int


class TrafficInsights(CamelModel):
    hourly_volume: list[HourCount] = []
    day_of_week_trends: list[DayCount] = []
    traffic_trend: list[DateCount] = []
    total_visits: int = 0
