"""
Analytics service - Visitor reporting over a date range.

Aggregation happens in Python over the rows in range; a month of
front-desk traffic is small enough that this stays cheap.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Visitor
from ...shared.validators import end_of_day, start_of_day, to_naive_utc, utcnow
from ..organization.repository import OrganizationRepository
from ..visitor.repository import VisitorRepository
from .schemas import (
    CompanyCount,
    DateCount,
    DateRangeInput,
    DayCount,
    HourCount,
    NamedCount,
    OverviewMetrics,
    TopVisitor,
    TrafficInsights,
    VisitorAnalytics,
    VisitorTypeCount,
)

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def resolve_range(data: DateRangeInput, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Default: first of the current month (UTC) through the end of today"""
    now = now or utcnow()
    start = start_of_day(to_naive_utc(data.start_date)) if data.start_date else datetime(now.year, now.month, 1)
    end = end_of_day(to_naive_utc(data.end_date)) if data.end_date else end_of_day(now)
    return start, end


def hour_label(hour: int) -> str:
    return f"{hour}:00"


def sunday_index(value: datetime) -> int:
    # Python weekday() is Monday=0; reports start the week on Sunday
    return (value.weekday() + 1) % 7


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db

    def _visitors(self, clerk_org_id: Optional[str], data: DateRangeInput) -> Optional[list[Visitor]]:
        organization = OrganizationRepository.get_by_clerk_id(self.db, clerk_org_id)
        if not organization:
            return None
        start, end = resolve_range(data)
        visitors = VisitorRepository.list_for_organization(self.db, organization.id, since=start, until=end)
        logger.info(f"📊 {len(visitors)} visitors for org {organization.id} between {start} and {end}")
        return visitors

    def get_overview_metrics(self, clerk_org_id: Optional[str], data: DateRangeInput) -> OverviewMetrics:
        visitors = self._visitors(clerk_org_id, data)
        if not visitors:
            return OverviewMetrics()

        durations = [
            (v.check_out_time - v.check_in_time).total_seconds() for v in visitors if v.check_out_time
        ]
        avg_minutes = round(sum(durations) / len(durations) / 60) if durations else 0

        hours = Counter(v.check_in_time.hour for v in visitors)
        peak_hour, peak_count = max(hours.items(), key=lambda item: (item[1], -item[0]))

        frequency: dict[str, TopVisitor] = {}
        for v in visitors:
            key = v.email.lower()
            if key not in frequency:
                frequency[key] = TopVisitor(name=v.full_name, email=v.email, company=v.company, count=0)
            frequency[key].count += 1
        top_visitors = sorted(frequency.values(), key=lambda t: t.count, reverse=True)[:5]

        companies = Counter(v.company for v in visitors)

        return OverviewMetrics(
            total_visits=len(visitors),
            avg_visit_duration=avg_minutes,
            peak_check_in_hour=peak_hour,
            peak_check_in_count=peak_count,
            top_visitors=top_visitors,
            top_companies=[CompanyCount(company=c, count=n) for c, n in companies.most_common(5)],
        )

    def get_visitor_analytics(self, clerk_org_id: Optional[str], data: DateRangeInput) -> VisitorAnalytics:
        visitors = self._visitors(clerk_org_id, data)
        if not visitors:
            return VisitorAnalytics()

        emails = Counter(v.email.lower() for v in visitors)
        repeat = sum(1 for n in emails.values() if n > 1)
        employees = Counter(v.whom_to_see for v in visitors)
        companies = Counter(v.company for v in visitors)

        return VisitorAnalytics(
            visitor_types=[VisitorTypeCount(type="Client", count=len(visitors))],
            total_visitors=len(emails),
            repeat_visitors=repeat,
            new_visitors=len(emails) - repeat,
            most_visited_employees=[NamedCount(name=name, count=n) for name, n in employees.most_common(10)],
            top_origins=[CompanyCount(company=c, count=n) for c, n in companies.most_common(10)],
        )

    def get_traffic_insights(self, clerk_org_id: Optional[str], data: DateRangeInput) -> TrafficInsights:
        visitors = self._visitors(clerk_org_id, data) or []

        hours = Counter(v.check_in_time.hour for v in visitors)
        days = Counter(sunday_index(v.check_in_time) for v in visitors)
        dates = Counter(v.check_in_time.date().isoformat() for v in visitors)

        return TrafficInsights(
            hourly_volume=[HourCount(hour=h, label=hour_label(h), count=hours[h]) for h in range(24)],
            day_of_week_trends=[DayCount(day=name, count=days[i]) for i, name in enumerate(DAY_NAMES)],
            traffic_trend=[DateCount(date=d, count=dates[d]) for d in sorted(dates)],
            total_visits=len(visitors),
        )
