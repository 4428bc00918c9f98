"""Reference endpoints: read-only access to the screen catalog."""

from fastapi import APIRouter, Depends

from intake_flow.catalog import ScreenCatalog
from intake_flow.models.screen import Screen

from intake_server.dependencies import get_catalog

router = APIRouter(tags=["reference"])


@router.get("/screens")
async def list_screens(catalog: ScreenCatalog = Depends(get_catalog)) -> list[Screen]:
    """All screens in display order."""
    return list(catalog)


@router.get("/screens/{screen_id}")
async def get_screen(
    screen_id: int, catalog: ScreenCatalog = Depends(get_catalog)
) -> Screen:
    """One screen by id; 404 if unknown."""
    try:
        return catalog.get_by_id(screen_id)
    except KeyError:
        raise ValueError(f"Screen not found: id={screen_id}")
