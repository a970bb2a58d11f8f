"""Authentication-related API routes (sign up/in/out, password reset, profile)."""

from fastapi import APIRouter, Depends

from ayurdiet.api.deps import get_current_user
from ayurdiet.models.user import PasswordResetIn, ProfileUpdateIn, SignInIn, SignUpIn
from ayurdiet.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=201)
def sign_up(data: SignUpIn):
    return auth_service.sign_up(
        data.email,
        data.password,
        display_name=data.displayName,
        role=data.role,
        hospital_id=data.hospitalId,
        patient_details=data.patient.model_dump(exclude_none=True) if data.patient else None,
    )


@router.post("/signin")
def sign_in(data: SignInIn):
    return auth_service.sign_in(data.email, data.password)


@router.post("/signout")
def sign_out(user=Depends(get_current_user)):
    auth_service.sign_out(user["uid"])
    return {"message": "Signed out"}


@router.post("/password-reset")
def password_reset(data: PasswordResetIn):
    auth_service.send_password_reset(data.email)
    return {"message": "Password reset email sent"}


@router.get("/me")
def me(user=Depends(get_current_user)):
    """Return the current user's profile, role and permission flags."""
    return auth_service.current_user_view(user["uid"], user)


@router.put("/profile")
def update_profile(data: ProfileUpdateIn, user=Depends(get_current_user)):
    return auth_service.update_profile(user["uid"], display_name=data.displayName, photo_url=data.photoURL)
