from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from quizdrill.database import get_db, transaction
from quizdrill.errors import InvalidInput, NotFound
from quizdrill.models import User
from quizdrill.schemas import ExportKeyResponse, MeResponse, MeUpdateRequest, RestoreRequest
from quizdrill.utils.auth_utils import find_user, get_current_user, set_identity_cookie

router = APIRouter()

DISPLAY_NAME_MIN = 2
DISPLAY_NAME_MAX = 40

def _me(user: User) -> dict:
    return {"public_id": user.public_id, "display_name": user.display_name, "email": user.email}

@router.get("/me", response_model=MeResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user's profile"""
    return _me(current_user)

@router.put("/me", response_model=MeResponse)
def update_me(payload: MeUpdateRequest, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Update current user's display name"""
    if payload.display_name is not None:
        name = payload.display_name.strip()
        if len(name) < DISPLAY_NAME_MIN or len(name) > DISPLAY_NAME_MAX:
            raise InvalidInput(f"displayName must be {DISPLAY_NAME_MIN}..{DISPLAY_NAME_MAX} chars")
        with transaction(db, "Update user"):
            current_user.display_name = name
    return _me(current_user)

@router.get("/me/export-key", response_model=ExportKeyResponse)
def export_key(current_user: User = Depends(get_current_user)):
    """Public id to carry the identity to another browser"""
    return {"public_id": current_user.public_id}

@router.post("/me/restore")
def restore_account(payload: RestoreRequest, response: Response, db: Session = Depends(get_db)):
    """Switch this browser to an existing identity"""
    public_id = payload.public_id.strip()
    if not public_id:
        raise InvalidInput("publicId required")
    user = find_user(db, public_id)
    if not user:
        raise NotFound("user not found")
    set_identity_cookie(response, user.public_id, same_site="lax")
    return {"status": "restored"}
