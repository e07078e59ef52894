# agency_portal/modules/help_requests/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from agency_portal.config.database import get_db
from agency_portal.core.auth.dependencies import get_current_user
from agency_portal.shared.database.models import User
from .service import HelpRequestsService
from .schemas import HelpRequestCreate, HelpRequestResponse

router = APIRouter()

@router.post("", response_model=HelpRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_help_request(
    request_data: HelpRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Open a help request for the administrators

    Available to every authenticated role. New requests start as `open`.
    """
    service = HelpRequestsService(db)
    return await service.create_help_request(request_data, current_user)

@router.get("", response_model=List[HelpRequestResponse])
async def get_my_help_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Help requests opened by the current user, newest first"""
    service = HelpRequestsService(db)
    return await service.get_my_help_requests(current_user)
