"""
Bulk supplier import from CSV / Excel uploads
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from chanakya.api.errors import http_error
from chanakya.database import get_db
from chanakya.exceptions import BulkCreateError, ChanakyaError
from chanakya.services.importer import parse_upload, template_csv
from chanakya.services.supplier_service import SupplierRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/suppliers")
async def import_suppliers(
    file: UploadFile = File(...),
    dry_run: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    """
    Validate every row of the upload and insert the valid ones.
    With dry_run the report is returned and nothing is written.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        report = parse_upload(file.filename or "", content)
    except ChanakyaError as e:
        raise http_error(e)
    except Exception as e:
        # openpyxl raises a range of errors for files that are not workbooks
        logger.error(f"Could not read upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Could not read file: {e}")

    result = report.to_dict()
    result["dry_run"] = dry_run
    result["created"] = 0
    result["created_ids"] = []

    if dry_run or not report.valid_count:
        return result

    try:
        created = await SupplierRepository(db).bulk_create_suppliers(report.valid_records)
    except BulkCreateError as e:
        # Earlier rows are committed; tell the caller which ones
        status = http_error(e.error).status_code
        result["created"] = len(e.created)
        result["created_ids"] = [s.id for s in e.created]
        result["failed_record"] = e.index
        result["error"] = str(e.error)
        raise HTTPException(status_code=status, detail=result)
    except ChanakyaError as e:
        raise http_error(e)

    result["created"] = len(created)
    result["created_ids"] = [s.id for s in created]
    logger.info(f"Imported {len(created)} suppliers from {file.filename}")
    return result


@router.get("/template", response_class=PlainTextResponse)
async def import_template():
    """CSV template with the expected columns and sample rows"""
    return PlainTextResponse(
        template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="supplier_template.csv"'},
    )
