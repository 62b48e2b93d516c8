# photolibrary/services/api/routers/library.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from photolibrary.services.api.deps import get_library_service
from photolibrary.services.library_service import PhotoLibraryService

router = APIRouter(prefix="/api/library", tags=["library"])


@router.get("/authorization")
def get_authorization(svc: PhotoLibraryService = Depends(get_library_service)) -> Dict[str, str]:
    return {"state": svc.check_authorization().value}


@router.post("/authorization")
def request_authorization(svc: PhotoLibraryService = Depends(get_library_service)) -> Dict[str, str]:
    return {"state": svc.request_authorization().value}


@router.get("/albums")
def list_albums(svc: PhotoLibraryService = Depends(get_library_service)) -> Dict[str, List[Dict[str, Any]]]:
    return {"albums": [a.as_dict() for a in svc.get_albums()]}


@router.get("/assets")
async def get_library(
    request: Request,
    svc: PhotoLibraryService = Depends(get_library_service),
) -> Dict[str, Any]:
    """
    Query parameters are the getLibrary options, camelCase or snake_case
    (``?offset=0&limit=50&includeVideos=true``). Validation failures surface
    as 422 with the "Invalid options: ..." reason.
    """
    options = dict(request.query_params)
    page = await run_in_threadpool(svc.get_library, options)
    return page.as_dict()


@router.get("/assets/{asset_id}/file")
async def get_photo_url(
    asset_id: str,
    svc: PhotoLibraryService = Depends(get_library_service),
) -> Dict[str, Any]:
    artifact = await run_in_threadpool(svc.get_photo_url, asset_id)
    return artifact.as_dict()


@router.get("/assets/{asset_id}/thumbnail")
async def get_thumbnail_url(
    asset_id: str,
    width: Optional[int] = Query(None),
    height: Optional[int] = Query(None),
    quality: Optional[float] = Query(None),
    svc: PhotoLibraryService = Depends(get_library_service),
) -> Dict[str, Any]:
    artifact = await run_in_threadpool(svc.get_thumbnail_url, asset_id, width, height, quality)
    return artifact.as_dict()
