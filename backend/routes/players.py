"""Stored player endpoints."""

from fastapi import APIRouter, HTTPException

from backend import storage

router = APIRouter()


@router.get("/players")
async def list_players():
    """List all stored players."""
    return storage.list_players()


@router.get("/players/{record_id}")
async def get_player(record_id: str):
    """Get a stored player by record id."""
    player = storage.get_player(record_id)
    if player is None:
        raise HTTPException(404, "Player not found")
    return player


@router.delete("/players/{record_id}")
async def delete_player(record_id: str):
    """Forget a stored player; the next session starts fresh."""
    if not storage.delete_player(record_id):
        raise HTTPException(404, "Player not found")
    return {"ok": True}
