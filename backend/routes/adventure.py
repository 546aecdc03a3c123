"""Loaded adventure inspection endpoint."""

import logging

from fastapi import APIRouter, HTTPException

from adventurebot.loader import LoaderError, dump_graph
from backend.adventure import get_adventure

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/adventure")
async def adventure():
    """Return the served adventure in definition-file form."""
    try:
        graph = get_adventure()
    except FileNotFoundError:
        raise HTTPException(404, "Adventure file not found")
    except LoaderError as e:
        logger.warning("adventure file is invalid: %s", e)
        raise HTTPException(422, str(e))
    return dump_graph(graph)
