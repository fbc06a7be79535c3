"""
QuickNotes Backend: Static Page Route
=======================================

What:  GET / returns the bundled HTML/JS client, byte for byte.
"""

from fastapi import APIRouter, Depends, Response

from quicknotes.dependencies import get_asset_service
from quicknotes.services.asset_service import INDEX_ASSET, AssetService

router = APIRouter(tags=["Client"])


@router.get(
    "/",
    response_class=Response,
    responses={
        200: {"content": {"text/html": {}}, "description": "Client page"},
        404: {"content": {"text/plain": {}}, "description": "index.html is missing"},
    },
    summary="Serve the notes client page",
)
async def index(assets: AssetService = Depends(get_asset_service)) -> Response:
    body = await assets.read(INDEX_ASSET)
    return Response(content=body, media_type="text/html; charset=utf-8")
