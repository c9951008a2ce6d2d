"""
Knowledge base export for the voice assistant
"""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from typing import List, Optional

from chanakya.api.errors import http_error
from chanakya.config import get_settings
from chanakya.database import get_db
from chanakya.exceptions import ChanakyaError
from chanakya.services.knowledge_service import (
    KnowledgeSyncClient,
    build_context_summary,
    build_knowledge_report,
)
from chanakya.services.supplier_service import SupplierRepository

router = APIRouter()


class ContextRequest(BaseModel):
    current_view: str = "grid"
    recent_activity: List[str] = []


class SyncRequest(BaseModel):
    title: Optional[str] = None


def get_sync_client() -> KnowledgeSyncClient:
    return KnowledgeSyncClient()


async def _load_suppliers(db: AsyncSession):
    try:
        return await SupplierRepository(db).list_suppliers()
    except ChanakyaError as e:
        raise http_error(e)


@router.get("/report", response_class=PlainTextResponse)
async def knowledge_report(db: AsyncSession = Depends(get_db)):
    """Markdown snapshot of every supplier"""
    suppliers = await _load_suppliers(db)
    report = build_knowledge_report(
        suppliers, top_fraction=get_settings().TOP_PERFORMER_FRACTION
    )
    return PlainTextResponse(report, media_type="text/markdown")


@router.post("/context")
async def assistant_context(
    data: ContextRequest,
    db: AsyncSession = Depends(get_db),
):
    """Short system context for a voice assistant session"""
    suppliers = await _load_suppliers(db)
    return {
        "context": build_context_summary(
            suppliers,
            current_view=data.current_view,
            recent_activity=data.recent_activity,
        )
    }


@router.post("/sync")
async def sync_knowledge(
    data: Optional[SyncRequest] = None,
    db: AsyncSession = Depends(get_db),
    client: KnowledgeSyncClient = Depends(get_sync_client),
):
    """Push the current report to the configured knowledge-base endpoint"""
    suppliers = await _load_suppliers(db)
    report = build_knowledge_report(
        suppliers, top_fraction=get_settings().TOP_PERFORMER_FRACTION
    )
    try:
        remote = await client.push(report, title=data.title if data else None)
    except ChanakyaError as e:
        raise http_error(e)
    return {
        "status": "synced",
        "suppliers": len(suppliers),
        "characters": len(report),
        "remote": remote,
    }
