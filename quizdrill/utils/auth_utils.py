from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session
from uuid import uuid4
import logging

from quizdrill.config import settings
from quizdrill.database import get_db, get_supabase_client, storage_errors, transaction
from quizdrill.errors import InvalidInput, Unauthorized
from quizdrill.models import User

COOKIE_NAME = "sq_uid"
PUBLIC_ID_HEADER = "X-Public-Id"
COOKIE_MAX_AGE = 365 * 24 * 3600  # 1 year
MAX_PUBLIC_ID_LENGTH = 36

def set_identity_cookie(response: Response, public_id: str, same_site: str = None):
    """Persist the public id in the browser; cross-site cookies need None + Secure"""
    if same_site is None:
        same_site = "none" if settings.secure_cookies else "lax"
    response.set_cookie(
        key=COOKIE_NAME,
        value=public_id,
        max_age=COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite=same_site,
    )

def verify_supabase_token(token: str):
    """Verify Supabase JWT token"""
    try:
        user = get_supabase_client().auth.get_user(token)
        if user and user.user:
            return user.user
        return None
    except Exception as e:
        logging.error(f"Supabase token verification failed: {e}")
        return None

def find_user(db: Session, public_id: str):
    with storage_errors("Select user"):
        return db.query(User).filter(User.public_id == public_id).first()

def is_valid_public_id(public_id: str) -> bool:
    return bool(public_id) and len(public_id) <= MAX_PUBLIC_ID_LENGTH

def find_or_create_user(db: Session, public_id: str) -> User:
    """Existing user for this public id, or a new one carrying it"""
    if not is_valid_public_id(public_id):
        raise InvalidInput(f"public id must be 1..{MAX_PUBLIC_ID_LENGTH} characters")
    user = find_user(db, public_id)
    if user:
        return user
    user = User(public_id=public_id)
    with transaction(db, "Create user"):
        db.add(user)
    return user

def _bearer_token(request: Request):
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None

def get_current_user(request: Request, response: Response, db: Session = Depends(get_db)) -> User:
    """Resolve the caller: bearer token, X-Public-Id header, sq_uid cookie, else a new anonymous user"""
    token = _bearer_token(request) if settings.supabase_enabled else None
    if token:
        supabase_user = verify_supabase_token(token)
        if supabase_user is None:
            raise Unauthorized()
        return find_or_create_user(db, str(supabase_user.id))

    header = request.headers.get(PUBLIC_ID_HEADER, "").strip()
    if header:
        user = find_or_create_user(db, header)
        set_identity_cookie(response, user.public_id)
        return user

    cookie = request.cookies.get(COOKIE_NAME, "").strip()
    if is_valid_public_id(cookie):
        return find_or_create_user(db, cookie)

    if cookie:
        logging.warning("Ignoring malformed identity cookie")

    user = find_or_create_user(db, str(uuid4()))
    set_identity_cookie(response, user.public_id)
    logging.info(f"Created anonymous user {user.public_id}")
    return user
