"""FastAPI API endpoints under /api.

Endpoint groups: skill (voice-assistant requests), adventure (loaded
definition), players (stored player state), health and settings.
"""

from fastapi import APIRouter

from .adventure import router as adventure_router
from .players import router as players_router
from .settings import router as settings_router
from .skill import router as skill_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(adventure_router)
router.include_router(players_router)
router.include_router(skill_router)
