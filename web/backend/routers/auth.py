from fastapi import APIRouter, Depends

from core.app_context import AppContext
from core.models import User
from web.backend.dependencies import get_context, get_current_user
from web.backend.schemas import LoginRequest

router = APIRouter()


@router.post("/login")
def login(req: LoginRequest, context: AppContext = Depends(get_context)):
    user = context.auth.login(req.email)
    return {"user": user.to_dict(), "isAuthenticated": True}


@router.post("/logout")
def logout(context: AppContext = Depends(get_context)):
    context.auth.logout()
    return {"success": True, "isAuthenticated": False}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"user": user.to_dict(), "isAuthenticated": True}
