"""
Routes de connexion.

Le jeton est posé dans le cookie httpOnly "session" et renvoyé dans le
corps pour les clients qui utilisent l'en-tête Authorization.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...core.entities.session import Role
from ...core.errors import Unauthorized
from ..deps import SESSION_COOKIE, get_container
from ..schemas import LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth")


@router.post("/login")
def login(body: LoginRequest, request: Request):
    """Connexion administrateur (mot de passe seul) ou contributeur."""
    container = get_container(request)
    auth = container.auth_service()
    try:
        token, claims = auth.login(body.password, body.username)
    except Unauthorized as e:
        return JSONResponse({"error": e.message, "details": e.details}, status_code=401)

    redirect = "/admin" if claims.role is Role.ADMIN else "/contributor"
    response = JSONResponse(
        {
            "success": True,
            "role": claims.role.value,
            "user": claims.user,
            "display_name": claims.display_name,
            "redirect": redirect,
            "token": token,
        }
    )
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=int(container.session_codec().ttl.total_seconds()),
        httponly=True,
        samesite="lax",
        path="/",
    )
    return response


@router.post("/logout")
def logout():
    response = JSONResponse({"success": True})
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response
