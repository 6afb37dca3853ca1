from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session
from cleanlab.api.deps import get_current_user, get_token
from cleanlab.config import settings
from cleanlab.database import get_db
from cleanlab.models import User
from cleanlab.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class RegisterRequest(BaseModel):
    """Request model for /register"""

    phoneNumber: str
    fullName: str
    password: str
    email: str | None = None


class VerifyRequest(BaseModel):
    phoneNumber: str
    code: str


class LoginRequest(BaseModel):
    phoneNumber: str
    password: str


class ResendCodeRequest(BaseModel):
    phoneNumber: str


def _code_payload(code: str) -> dict:
    # Echoing the code is a development convenience
    return {"verificationCode": code} if settings.expose_verification_code else {}


@router.post("/register", status_code=201)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and send a verification code"""
    user, code = auth_service.register_user(
        db,
        phone_number=request.phoneNumber,
        full_name=request.fullName,
        password=request.password,
        email=request.email,
    )
    return {
        "success": True,
        "message": "Registration successful. Please verify your account.",
        "data": {
            "userId": user.id,
            "requiresVerification": True,
            **_code_payload(code),
        },
    }


@router.post("/verify-phone")
def verify_phone(request: VerifyRequest, db: Session = Depends(get_db)):
    auth_service.verify_user(db, request.phoneNumber, request.code)
    return {"success": True, "message": "Phone number verified successfully"}


@router.post("/login")
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user, token = auth_service.login_user(db, request.phoneNumber, request.password)
    return {
        "success": True,
        "message": "Login successful",
        "data": {
            "token": token.token,
            "expiresAt": token.expires_at.isoformat(),
            "user": user.to_dict(),
        },
    }


@router.post("/resend-code")
def resend_code(request: ResendCodeRequest, db: Session = Depends(get_db)):
    code = auth_service.resend_code(db, request.phoneNumber)
    return {
        "success": True,
        "message": "New verification code generated",
        "data": _code_payload(code),
    }


@router.post("/logout")
def logout(
    token: str | None = Depends(get_token),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.logout_user(db, token)
    return {"success": True, "message": "Logged out"}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"success": True, "data": user.to_dict()}
