"""
web/routes.py -- Serves the bundled single-page admin UI.

The UI is a prebuilt SPA (ui/dist). These routes know nothing about the API;
asgi.py includes them after the API routers so API paths always win.

Routes (only when UI_DIST_DIR points at a built UI):
  GET /assets/{path}  -- hashed JS/CSS bundles from <dist>/assets
  GET /favicon.ico    -- <dist>/favicon.ico
  GET /{anything}     -- SPA fallback: <dist>/index.html so client-side routes
                         such as /admin and /login survive a reload

Unknown /api/... paths are never answered with index.html; they stay JSON 404s.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

logger = logging.getLogger("linkdeck.web")


def _resolve_inside(root: Path, relative: str) -> Path:
    """Resolve relative under root, refusing anything that escapes it."""
    candidate = (root / relative).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return candidate


def build_ui_router(dist_dir: str | Path) -> APIRouter:
    """Return a router serving the SPA found in dist_dir.

    Raises FileNotFoundError if dist_dir has no index.html -- a misconfigured
    UI_DIST_DIR is a startup error, not a silent blank page.
    """
    root = Path(dist_dir).resolve()
    index = root / "index.html"
    if not index.is_file():
        raise FileNotFoundError(f"UI build not found: {index}")
    assets = root / "assets"
    router = APIRouter(include_in_schema=False)

    @router.get("/assets/{path:path}")
    def ui_asset(path: str) -> FileResponse:
        return FileResponse(_resolve_inside(assets.resolve(), path))

    @router.get("/favicon.ico")
    def favicon() -> FileResponse:
        return FileResponse(_resolve_inside(root, "favicon.ico"))

    @router.get("/{full_path:path}")
    def spa_fallback(full_path: str) -> FileResponse:
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(index)

    logger.info("Serving UI from %s", root)
    return router
