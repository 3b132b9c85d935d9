# cath/api/pages/auth.py

"""
SSO (staff) and IDAM (verified users) sign-in.

The identity provider sends the browser back to /login/callback with a
signed JWT. Claims used: sub, email, role, provenance, given_name,
family_name.
"""
from datetime import datetime

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from cath.core.config import settings
from cath.core.logger import logger
from cath.core.security import decode_access_token, get_csrf_token
from cath.db.database import get_db
from cath.db.models import User, UserProvenance, UserRole

router = APIRouter()


def _upsert_user(db: Session, claims: dict) -> User:
    role = UserRole(claims.get("role") or UserRole.VERIFIED.value)
    default_provenance = UserProvenance.B2C_IDAM if role == UserRole.VERIFIED else UserProvenance.SSO
    provenance = UserProvenance(claims.get("provenance") or default_provenance.value)

    user = db.query(User).filter(User.user_provenance_id == str(claims["sub"])).first()
    if user is None:
        user = User(user_provenance_id=str(claims["sub"]), created_date=datetime.utcnow())
        db.add(user)

    user.email = (claims.get("email") or "").strip().lower()
    user.first_name = claims.get("given_name") or claims.get("firstName")
    user.surname = claims.get("family_name") or claims.get("surname")
    user.role = role
    user.user_provenance = provenance
    user.last_signed_in_date = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user


@router.get("/login")
def login():
    return RedirectResponse(settings.SSO_LOGIN_URL, status_code=303)


@router.get("/login/callback")
def login_callback(request: Request, token: str = "", db: Session = Depends(get_db)):
    if not token:
        raise HTTPException(status_code=401, detail="Sign in failed")

    try:
        claims = decode_access_token(token)
    except jwt.PyJWTError:
        logger.warning("Rejected sign-in callback with an invalid token")
        raise HTTPException(status_code=401, detail="Sign in failed")

    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Sign in failed")

    try:
        user = _upsert_user(db, claims)
    except ValueError:
        logger.warning("Rejected sign-in callback with unknown role or provenance")
        raise HTTPException(status_code=401, detail="Sign in failed")

    request.session["user"] = {
        "id": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "provenance": user.user_provenance.value,
        "firstName": user.first_name,
        "surname": user.surname,
    }
    logger.info("User %s signed in (%s)", user.id, user.role.value)

    home = "/subscription-management" if user.role == UserRole.VERIFIED else "/"
    return RedirectResponse(home, status_code=303)


@router.get("/logout")
def logout(request: Request):
    request.session.clear()
    return RedirectResponse("/", status_code=303)


@router.get("/csrf-token")
def csrf_token(request: Request):
    """Token for scripts that post with the X-CSRF-Token header"""
    return JSONResponse({"csrfToken": get_csrf_token(request)})
