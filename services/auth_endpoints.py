"""
Authentication endpoints (demo accounts, real signed tokens).

Login and register accept any credentials and return a mock user together
with a JWT; ``/verify`` checks that token.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from services import mock_data
from services.auth import create_jwt_token, get_current_user
from services.errors import ValidationError
from services.responses import success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


@router.post("/login")
async def login(body: LoginRequest):
    if not body.email or not body.password:
        raise ValidationError("Email e senha são obrigatórios")

    user = mock_data.demo_user(email=body.email)
    token = create_jwt_token(user["id"], user["email"], user["name"])
    logger.info(f"User logged in: {body.email}")
    return success({"user": user, "token": token, "message": "Login realizado com sucesso"})


@router.post("/register", status_code=201)
async def register(body: RegisterRequest):
    if not body.name or not body.email or not body.password:
        raise ValidationError("Nome, email e senha são obrigatórios")

    user = {
        "id": mock_data.new_id(),
        "name": body.name,
        "email": body.email,
        "isFirstTime": True,
        "isAuthenticated": True,
    }
    token = create_jwt_token(user["id"], user["email"], user["name"])
    logger.info(f"User registered: {body.email}")
    return JSONResponse(
        status_code=201,
        content=success({"user": user, "token": token, "message": "Usuário criado com sucesso"}),
    )


@router.get("/verify")
async def verify(claims: Dict[str, Any] = Depends(get_current_user)):
    user = {
        "id": claims.get("sub"),
        "name": claims.get("name"),
        "email": claims.get("email"),
        "isAuthenticated": True,
    }
    return success({"valid": True, "user": user})


@router.post("/logout")
async def logout():
    return success(message="Logout realizado com sucesso")
