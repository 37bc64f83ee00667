from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sebeta_mart.database import get_db
from sebeta_mart.api.deps import get_current_user
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.models.user import User
from sebeta_mart.services import dashboard_service

router = APIRouter()


@router.get("", response_model=ResponseModel)
def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Dashboard for the logged-in user's role"""
    return ResponseModel(success=True, data=dashboard_service.build_dashboard(db, current_user))
