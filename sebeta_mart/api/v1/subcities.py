from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sebeta_mart.database import get_db
from sebeta_mart.schemas.common import ResponseModel
from sebeta_mart.models.subcity import Subcity

router = APIRouter()


@router.get("", response_model=ResponseModel)
def list_subcities(db: Session = Depends(get_db)):
    subcities = db.query(Subcity).order_by(Subcity.name.asc()).all()
    return ResponseModel(success=True, data=[{"id": s.id, "name": s.name} for s in subcities])
