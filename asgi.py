"""
asgi.py -- Application assembly for LinkDeck.

This is the ONLY file that imports from both api/ and web/. It joins the two
independent layers into a single ASGI app without coupling them to each other.

Run with:  uvicorn asgi:app
           python main.py serve
"""

from api.main import app
from core.config import get_settings
from web.routes import build_ui_router

# Included last: the SPA fallback matches every path, so the API routers
# registered in api/main.py must come first.
_ui_dist_dir = get_settings().ui_dist_dir
if _ui_dist_dir:
    app.include_router(build_ui_router(_ui_dist_dir), tags=["Web UI"])
