# agency_portal/shared/services/performance_service.py
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple
import logging

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import Client, PerformanceMetric, Report, User
from agency_portal.shared.services.attendance_service import AttendanceService

logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly")

class PerformanceService:
    """Per-agent metrics over a daily, weekly or monthly window"""

    @staticmethod
    def period_bounds(period: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        """
        Start and end of a period ending now.

        daily starts at local midnight, weekly seven days back and monthly
        one calendar month back.
        """
        now = now or datetime.now()
        if period == "daily":
            start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        elif period == "weekly":
            start = now - timedelta(days=7)
        elif period == "monthly":
            start = now - relativedelta(months=1)
        else:
            raise ValueError(f"Invalid period: {period}")
        return start, now

    @staticmethod
    def clients_between(db: Session, agent_id: int, start: datetime, end: datetime):
        return db.query(Client).filter(
            Client.agent_id == agent_id,
            Client.interaction_time >= start,
            Client.interaction_time <= end
        ).order_by(Client.interaction_time.desc()).all()

    @staticmethod
    def score(attendance_rate: float, approval_rate: float, clients_acquired: int) -> int:
        raw = 0.4 * attendance_rate + 0.3 * approval_rate + 6 * clients_acquired
        return min(100, round(raw))

    @staticmethod
    def compute_metrics(
        db: Session,
        user: User,
        period: str,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        start, end = PerformanceService.period_bounds(period, now)

        clients = PerformanceService.clients_between(db, user.id, start, end)
        records = AttendanceService.records_between(db, user.id, start, end)
        reports = db.query(Report).filter(
            Report.submitted_by_id == user.id,
            Report.created_at >= start,
            Report.created_at <= end
        ).all()

        reviewed = [r for r in reports if r.status != "pending"]
        approved = [r for r in reviewed if r.status == "approved"]
        approval_rate = len(approved) / len(reviewed) * 100 if reviewed else 0.0
        attendance_rate = AttendanceService.rate(records)

        return {
            "period": period,
            "start_date": start,
            "end_date": end,
            "clients": clients,
            "clients_acquired": len(clients),
            "attendance_rate": attendance_rate,
            "reports_submitted": len(reports),
            "report_approval_rate": approval_rate,
            "performance_score": PerformanceService.score(attendance_rate, approval_rate, len(clients)),
        }

    @staticmethod
    def snapshot(
        db: Session,
        user: User,
        period: str,
        now: Optional[datetime] = None
    ) -> PerformanceMetric:
        """Store the current metrics; trend is the change against the previous snapshot"""
        metrics = PerformanceService.compute_metrics(db, user, period, now)

        metric = db.query(PerformanceMetric).filter(
            PerformanceMetric.user_id == user.id,
            PerformanceMetric.period == period
        ).first()

        if metric is None:
            metric = PerformanceMetric(user_id=user.id, period=period, performance_trend=0)
            db.add(metric)
        else:
            metric.performance_trend = metrics["performance_score"] - metric.performance_score

        metric.clients_acquired = metrics["clients_acquired"]
        metric.attendance_rate = round(metrics["attendance_rate"])
        metric.performance_score = metrics["performance_score"]
        metric.reports_submitted = metrics["reports_submitted"]
        metric.report_approval_rate = round(metrics["report_approval_rate"])

        db.flush()
        logger.info(
            f"Performance snapshot {period} for {user.work_id}: "
            f"score={metric.performance_score} trend={metric.performance_trend}"
        )
        return metric
