"""
Analytics API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chanakya.api.errors import http_error
from chanakya.config import get_settings
from chanakya.database import get_db
from chanakya.exceptions import ChanakyaError
from chanakya.services.analytics import build_summary
from chanakya.services.supplier_service import SupplierRepository

router = APIRouter()


@router.get("/summary")
async def analytics_summary(db: AsyncSession = Depends(get_db)):
    """Distribution, industry, category, status and trend figures"""
    try:
        suppliers = await SupplierRepository(db).list_suppliers()
    except ChanakyaError as e:
        raise http_error(e)
    return build_summary(suppliers, top_fraction=get_settings().TOP_PERFORMER_FRACTION)
