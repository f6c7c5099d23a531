"""
api/routes/transfer.py -- Bulk export and import of the link catalog.

Routes:
  GET  /api/admin/export  -- download the whole catalog as a JSON attachment
  POST /api/admin/import  -- upload an export file (multipart field "file")

Import is all-or-nothing: a malformed file is rejected before any write
(400), and a store failure mid-import rolls back every change (500).
Uploads are capped at IMPORT_MAX_BYTES (default 10 MB) -> 413.
"""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.models import ErrorDetail, ImportResponse
from auth.dependencies import get_current_user
from catalog.store import LinkStore
from catalog.transfer import EXPORT_FILENAME, document_to_dict, export_catalog, import_document, parse_document
from core.config import get_settings
from core.errors import InvalidInputError

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/admin/export")
def export_links(request: Request) -> JSONResponse:
    """Return every group and link (ids kept, timestamps stripped) as a file download."""
    store: LinkStore = request.app.state.link_store
    doc = export_catalog(store)
    return JSONResponse(
        content=document_to_dict(doc),
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )


@router.post("/admin/import", response_model=ImportResponse)
async def import_links(request: Request, file: UploadFile = File(...)) -> ImportResponse:
    """Merge an uploaded export file into the catalog.

    Groups are matched by name: a matching group keeps its id and has all of
    its links replaced by the file's; other groups are created.
    """
    # Size guard -- read up to the limit + 1 byte; reject if over limit
    max_bytes = get_settings().import_max_bytes
    raw = await file.read(max_bytes + 1)
    if len(raw) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=ErrorDetail(
                code="file_too_large",
                message=f"Upload must be {max_bytes} bytes or smaller.",
            ).model_dump(),
        )
    if not raw:
        raise InvalidInputError("Import file is empty.")

    doc = parse_document(raw)
    store: LinkStore = request.app.state.link_store
    result = await run_in_threadpool(import_document, store, doc)
    return ImportResponse(
        message="Data imported successfully",
        groups_created=result.groups_created,
        groups_replaced=result.groups_replaced,
        links_imported=result.links_imported,
    )
