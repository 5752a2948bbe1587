"""
Media file serving for uploaded fanwork files.

Routes:
- GET /media/{locator} - Serve a stored upload by its locator
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from fanhub.services.storage import LocalAssetStore, content_type_for, get_asset_store

router = APIRouter(prefix="/media", tags=["media"])


@router.get("/{locator}")
async def serve_media(
    locator: str,
    store: Annotated[LocalAssetStore, Depends(get_asset_store)],
) -> Response:
    """
    Serve an uploaded file.

    Locators are random names, so possessing one is what grants access.
    Unknown or malformed locators return 404.
    """
    return Response(content=store.serve(locator), media_type=content_type_for(locator))
