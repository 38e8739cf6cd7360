"""
Cache API endpoint - drop cached sheet data after an edit in the spreadsheet
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from menu_backend.config import get_settings
from menu_backend.services.sheets_service import SheetsService, get_sheets_service

router = APIRouter()

settings = get_settings()


@router.post("/invalidate")
async def invalidate_cache(
    sheet: Optional[str] = None,
    sheets: SheetsService = Depends(get_sheets_service),
):
    known = {settings.MENU_SHEET, settings.WEEKMENU_SHEET, settings.PAIRINGS_SHEET}
    if settings.RULES_SHEET:
        known.add(settings.RULES_SHEET)
    if sheet is not None and sheet not in known:
        raise HTTPException(status_code=400, detail=f"Unknown sheet. Must be one of: {sorted(known)}")

    sheets.invalidate(sheet)
    return {"success": True, "invalidated": sheet or "all"}
