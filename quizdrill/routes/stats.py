from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizdrill.config import settings
from quizdrill.database import get_db
from quizdrill.models import User
from quizdrill.schemas import StatsResponse
from quizdrill.services.stats import compute_user_stats
from quizdrill.utils.auth_utils import get_current_user

router = APIRouter()

@router.get("/stats", response_model=StatsResponse)
def get_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Current user's exam and answer statistics"""
    return compute_user_stats(db, current_user.id, settings.pass_threshold)
