import os
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, EmailStr, Field
from google.oauth2 import id_token
from google.auth.transport import requests as grequests

from reclaim.errors import (
    EmailInUse,
    ExternalServiceFailure,
    InvalidCredentials,
    NotFound,
    WeakPassword,
)
from reclaim.models.user import UserProfile
from reclaim.services.identity import IdentityProvider, ProfileStore
from reclaim.utils.auth_helper import create_access_token
from reclaim.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)

CAMPUS_EMAIL_DOMAIN = "@plv.edu.ph"


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_profiles(request: Request) -> ProfileStore:
    return request.app.state.profiles


class RegisterRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=80)
    student_id: str = Field(pattern=r"^\d{2}-\d{4}$")
    contact_number: str = Field(pattern=r"^09\d{9}$")
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class FirebaseIDToken(BaseModel):
    id_token: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class TokenResponse(BaseModel):
    access_token: str
    user_id: str
    role: str


def _require_campus_email(email: str):
    if not email.lower().endswith(CAMPUS_EMAIL_DOMAIN):
        raise HTTPException(status_code=400, detail=f"Must use campus email ({CAMPUS_EMAIL_DOMAIN})")


def _issue_token(user_id: str, profiles: ProfileStore) -> TokenResponse:
    try:
        profile = profiles.get_profile(user_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="User profile not found")
    except ExternalServiceFailure as e:
        raise HTTPException(status_code=502, detail=e.message)

    return TokenResponse(
        access_token=create_access_token(user_id, profile),
        user_id=user_id,
        role=profile.role,
    )


@router.post("/register")
def register(payload: RegisterRequest, identity: IdentityProvider = Depends(get_identity)):
    _require_campus_email(payload.email)

    profile = UserProfile(
        full_name=payload.full_name.strip(),
        student_id=payload.student_id,
        contact_number=payload.contact_number,
        email=payload.email,
        role="user",
    )

    try:
        user_id = identity.create_account(payload.email, payload.password, profile)
    except EmailInUse:
        raise HTTPException(status_code=409, detail="This email address is already registered.")
    except WeakPassword as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ExternalServiceFailure as e:
        raise HTTPException(status_code=502, detail=e.message)

    return {"ok": True, "user_id": user_id}


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    identity: IdentityProvider = Depends(get_identity),
    profiles: ProfileStore = Depends(get_profiles),
):
    try:
        user_id = identity.sign_in(payload.email, payload.password)
    except InvalidCredentials:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    except ExternalServiceFailure as e:
        raise HTTPException(status_code=502, detail=e.message)

    return _issue_token(user_id, profiles)


@router.post("/firebase", response_model=TokenResponse)
def firebase_auth(payload: FirebaseIDToken, profiles: ProfileStore = Depends(get_profiles)):
    try:
        idinfo = id_token.verify_firebase_token(
            payload.id_token,
            grequests.Request(),
            audience=os.getenv("FIREBASE_PROJECT_ID"),
        )
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid Firebase ID token")

    if not idinfo:
        raise HTTPException(status_code=401, detail="Invalid Firebase ID token")

    # idinfo now trusted and parsed by Google libs
    return _issue_token(idinfo["sub"], profiles)


@router.post("/password-reset")
def password_reset(payload: PasswordResetRequest, identity: IdentityProvider = Depends(get_identity)):
    _require_campus_email(payload.email)

    try:
        identity.send_password_reset(payload.email)
    except ExternalServiceFailure as e:
        raise HTTPException(status_code=502, detail=e.message)

    return {"ok": True}
