import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from ..auth import (SESSION_COOKIE, create_session_token, get_settings,
                    is_authenticated, verify_admin_password)
from ..config import Settings
from ..schemas import LoginIn

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api")

@router.post("/login")
def api_login(payload: LoginIn, response: Response, settings: Settings = Depends(get_settings)):
    if not verify_admin_password(payload.password, settings):
        logger.warning("login_rejected")
        return JSONResponse({"success": False, "message": "Invalid password"}, status_code=401)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(settings),
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE,
        max_age=settings.SESSION_MAX_AGE_S,
        path="/",
    )
    return {"success": True}

@router.post("/logout")
def api_logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(SESSION_COOKIE, path="/", secure=settings.COOKIE_SECURE,
                           httponly=True, samesite="strict")
    return {"success": True}

@router.get("/auth-status")
def api_auth_status(request: Request, settings: Settings = Depends(get_settings)):
    return {"authenticated": is_authenticated(request, settings)}
