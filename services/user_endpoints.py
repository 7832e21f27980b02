"""User profile endpoints backed by demo data."""

from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from services import mock_data
from services.responses import success

router = APIRouter(prefix="/users", tags=["users"])


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None


@router.get("/profile")
async def get_profile():
    return success(mock_data.user_profile())


@router.put("/profile")
async def update_profile(body: ProfileUpdateRequest):
    profile = mock_data.updated_profile(body.name, body.email, body.preferences)
    return success(profile, message="Perfil atualizado com sucesso")


@router.get("/stats")
async def get_stats():
    return success(mock_data.user_stats())
