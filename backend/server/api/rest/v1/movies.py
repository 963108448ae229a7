from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from application.movies.tracker_service import MovieTrackerService
from application.movies.views import ViewMode, ViewModel
from config.settings import TRACKER_FOLDER_ENABLE
from life_tracker.config import settings as core_settings
from life_tracker.movies.errors import FolderStoreError, ImportFormatError, ValidationError
from server.api.rest.dependencies import get_tracker_service
from server.models.schemas import FolderLoadResponse, FolderSaveResponse, ImportResponse, MovieDraftRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["movies-v1"])


def _draft_kwargs(req: MovieDraftRequest) -> Dict[str, Any]:
    return {
        "name": req.name,
        "language": req.language or "",
        "platform": req.platform or "",
        "cast": req.cast or "",
    }


def _require_folder_feature(service: MovieTrackerService) -> None:
    if not TRACKER_FOLDER_ENABLE:
        raise HTTPException(status_code=404, detail="folder storage is disabled")
    if not service.folder_available:
        raise HTTPException(status_code=409, detail="Please select a storage folder first.")


@router.get("/movies")
async def list_movies(
    q: str = Query(default="", description="搜索（名称/语言/平台/演员，忽略大小写）"),
    facet_field: Optional[str] = Query(default=None, description="筛选字段：language / platform / cast"),
    facet_value: Optional[str] = Query(default=None, description="筛选值（忽略大小写，精确匹配）"),
    service: MovieTrackerService = Depends(get_tracker_service),
) -> List[Dict[str, Any]]:
    try:
        return service.list_movies(q=q, facet_field=facet_field, facet_value=facet_value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/movies/facets/{field}")
async def list_facet_values(
    field: str,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Dict[str, Any]:
    try:
        values = service.facet_values(field)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"field": field, "values": values}


@router.get("/movies/views/{mode}")
async def get_view(
    mode: ViewMode,
    q: str = Query(default=""),
    facet_field: Optional[str] = Query(default=None),
    facet_value: Optional[str] = Query(default=None),
    service: MovieTrackerService = Depends(get_tracker_service),
) -> ViewModel:
    filters: Dict[str, Any] = {}
    if mode is ViewMode.LIST:
        filters = {"q": q, "facet_field": facet_field, "facet_value": facet_value}
    try:
        return service.view(mode, **filters)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/movies")
async def add_movie(
    req: MovieDraftRequest,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Dict[str, Any]:
    try:
        return service.add_movie(**_draft_kwargs(req))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/movies/{entry_id}")
async def edit_movie(
    entry_id: str,
    req: MovieDraftRequest,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Dict[str, Any]:
    try:
        updated = service.edit_movie(entry_id, **_draft_kwargs(req))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="movie not found")
    return updated


@router.delete("/movies/{entry_id}", status_code=204, response_class=Response)
async def delete_movie(
    entry_id: str,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Response:
    if not service.delete_movie(entry_id):
        raise HTTPException(status_code=404, detail="movie not found")
    return Response(status_code=204)


@router.post("/movies/{entry_id}/watch")
async def mark_watched(
    entry_id: str,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Dict[str, Any]:
    entry = service.mark_watched(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="movie not found")
    return entry


@router.get("/movies/watched")
async def list_watched(
    service: MovieTrackerService = Depends(get_tracker_service),
) -> List[Dict[str, Any]]:
    return service.list_watched()


@router.post("/movies/watched/{entry_id}/unwatch")
async def mark_unwatched(
    entry_id: str,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Dict[str, Any]:
    entry = service.mark_unwatched(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="watched movie not found")
    return entry


@router.delete("/movies/watched/{entry_id}", status_code=204, response_class=Response)
async def delete_watched(
    entry_id: str,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Response:
    if not service.delete_watched(entry_id):
        raise HTTPException(status_code=404, detail="watched movie not found")
    return Response(status_code=204)


@router.get("/movies/logs")
async def list_logs(
    service: MovieTrackerService = Depends(get_tracker_service),
) -> List[Dict[str, Any]]:
    return service.list_logs()


@router.get("/movies/export")
async def export_dataset(
    service: MovieTrackerService = Depends(get_tracker_service),
) -> Response:
    filename = str(core_settings.EXPORT_FILENAME)
    return Response(
        content=service.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/movies/import")
async def import_dataset(
    request: Request,
    service: MovieTrackerService = Depends(get_tracker_service),
) -> ImportResponse:
    """Replace the whole dataset with the posted export document (raw JSON body)."""
    body = await request.body()
    try:
        counts = service.import_json(body)
    except ImportFormatError as e:
        logger.warning("import rejected: %s", e)
        raise HTTPException(status_code=400, detail="Failed to import. Please select a valid JSON export.")
    return ImportResponse(**counts)


@router.post("/movies/folder/save")
async def save_to_folder(
    service: MovieTrackerService = Depends(get_tracker_service),
) -> FolderSaveResponse:
    _require_folder_feature(service)
    try:
        filename = service.save_to_folder()
    except FolderStoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return FolderSaveResponse(filename=filename)


@router.post("/movies/folder/load")
async def load_from_folder(
    service: MovieTrackerService = Depends(get_tracker_service),
) -> FolderLoadResponse:
    _require_folder_feature(service)
    try:
        count = service.load_from_folder()
    except FolderStoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return FolderLoadResponse(movies=count)
