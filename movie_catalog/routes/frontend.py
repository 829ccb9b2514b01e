# movie_catalog/routes/frontend.py
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from movie_catalog.core.settings import settings
from movie_catalog.errors import NotFoundError
from movie_catalog.security import SessionContext, require_page_user

router = APIRouter(tags=["Frontend"])


@router.get("/favorites", include_in_schema=False)
async def favorites_page(_: SessionContext = Depends(require_page_user)):
    page = Path(settings.static_dir) / "favorites.html"
    if not page.is_file():
        raise NotFoundError("Page not found.")
    return FileResponse(page, media_type="text/html")
