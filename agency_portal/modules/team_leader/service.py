# agency_portal/modules/team_leader/service.py
from typing import List
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import AgentGroup, REPORT_TYPES, User
from agency_portal.shared.schemas.common import ReportResponse, UserSummary, report_to_response
from agency_portal.shared.services.report_service import ReportService
from .repository import TeamLeaderRepository
from .schemas import AggregateReportCreate, AggregatedReportResponse, TeamLeaderGroup

logger = logging.getLogger(__name__)

class TeamLeaderService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = TeamLeaderRepository(db)

    def _get_led_group(self, group_id: int, user: User) -> AgentGroup:
        group = self.repository.get_group_led_by(group_id, user.id)
        if not group:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Agent group not found"
            )
        return group

    async def get_groups(self, user: User) -> List[TeamLeaderGroup]:
        return [
            TeamLeaderGroup(
                id=group.id,
                name=group.name,
                sales_staff_id=group.sales_staff_id,
                member_count=len(group.members)
            )
            for group in self.repository.get_groups_led_by(user.id)
        ]

    async def get_group_members(self, group_id: int, user: User) -> List[UserSummary]:
        group = self._get_led_group(group_id, user)
        return [UserSummary.model_validate(m.agent) for m in group.members]

    async def get_group_reports(self, group_id: int, report_type: str, user: User) -> List[ReportResponse]:
        if report_type not in REPORT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid report type"
            )

        group = self._get_led_group(group_id, user)
        member_ids = [m.agent_id for m in group.members]
        reports = ReportService.reports_by_users(self.db, member_ids, report_type=report_type)
        return [report_to_response(r) for r in reports]

    async def create_aggregated_report(
        self,
        group_id: int,
        data: AggregateReportCreate,
        user: User
    ) -> AggregatedReportResponse:
        """
        Submit a report summarizing the group's reports.

        Every listed report must come from a group member and must not
        already belong to another aggregated report. Each one is linked to
        the new report through parent_report_id.
        """
        group = self._get_led_group(group_id, user)
        member_ids = {m.agent_id for m in group.members}

        report_ids = list(dict.fromkeys(data.report_ids or []))
        children = self.repository.get_reports_by_ids(report_ids)
        found_ids = {r.id for r in children}

        for report_id in report_ids:
            if report_id not in found_ids:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Report {report_id} not found"
                )
        for child in children:
            if child.submitted_by_id not in member_ids:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Report {child.id} was not submitted by a member of this group"
                )
            if child.parent_report_id is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Report {child.id} is already part of aggregated report {child.parent_report_id}"
                )

        report = ReportService.create_report(self.db, user, data, is_aggregated=True)
        for child in children:
            child.parent_report_id = report.id

        self.db.commit()
        self.db.refresh(report)

        logger.info(f"Aggregated report {report.id} for group {group.id} links {len(children)} reports")
        response = AggregatedReportResponse(**report_to_response(report).model_dump())
        response.child_report_ids = sorted(found_ids)
        return response
