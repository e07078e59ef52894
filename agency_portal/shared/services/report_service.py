# agency_portal/shared/services/report_service.py
from datetime import datetime
from typing import List, Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from agency_portal.shared.database.models import Report, User
from agency_portal.shared.schemas.common import ReportCreate, ReportReview

logger = logging.getLogger(__name__)

class ReportService:
    """Report storage and review shared by every role"""

    @staticmethod
    def create_report(
        db: Session,
        submitter: User,
        data: ReportCreate,
        is_aggregated: bool = False
    ) -> Report:
        now = datetime.now()
        report = Report(
            submitted_by_id=submitter.id,
            title=data.title,
            report_type=data.report_type.value,
            content=data.content,
            status='pending',
            is_aggregated=is_aggregated,
            created_at=now,
            updated_at=now
        )
        db.add(report)
        db.flush()
        logger.info(
            f"{'Aggregated report' if is_aggregated else 'Report'} {report.id} "
            f"({report.report_type}) submitted by {submitter.work_id}"
        )
        return report

    @staticmethod
    def reports_by_users(
        db: Session,
        user_ids: List[int],
        report_type: Optional[str] = None,
        is_aggregated: Optional[bool] = None
    ) -> List[Report]:
        if not user_ids:
            return []

        query = db.query(Report).options(
            joinedload(Report.submitted_by)
        ).filter(Report.submitted_by_id.in_(user_ids))

        if report_type is not None:
            query = query.filter(Report.report_type == report_type)
        if is_aggregated is not None:
            query = query.filter(Report.is_aggregated == is_aggregated)

        return query.order_by(Report.created_at.desc(), Report.id.desc()).all()

    @staticmethod
    def review_report(
        db: Session,
        reviewer: User,
        report_id: int,
        review: ReportReview,
        reviewable_submitter_ids: List[int]
    ) -> Report:
        """
        Approve or reject a report submitted by someone the reviewer oversees.

        Reports outside the reviewer's scope answer 404 like missing ones.
        """
        report = db.query(Report).filter(Report.id == report_id).first()
        if not report or report.submitted_by_id not in reviewable_submitter_ids:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Report not found"
            )

        report.status = review.status.value
        report.reviewed_by_id = reviewer.id
        report.feedback = review.feedback
        db.flush()

        logger.info(f"Report {report.id} {report.status} by {reviewer.work_id}")
        return report
