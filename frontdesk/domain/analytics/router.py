"""Analytics procedures"""

from ...rpc import ProcedureContext, ProcedureRouter
from .schemas import DateRangeInput
from .service import AnalyticsService

router = ProcedureRouter("analytics")


@router.query("getOverviewMetrics", DateRangeInput)
def get_overview_metrics(ctx: ProcedureContext, data: DateRangeInput):
    return AnalyticsService(ctx.db).get_overview_metrics(ctx.org_id, data)


@router.query("getVisitorAnalytics", DateRangeInput)
def get_visitor_analytics(ctx: ProcedureContext, data: DateRangeInput):
    return AnalyticsService(ctx.db).get_visitor_analytics(ctx.org_id, data)


@router.query("getTrafficInsights", DateRangeInput)
def get_traffic_insights(ctx: ProcedureContext, data: DateRangeInput):
    return AnalyticsService(ctx.db).get_traffic_insights(ctx.org_id, data)
