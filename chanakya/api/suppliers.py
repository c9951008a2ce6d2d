"""
Suppliers API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from chanakya.api.errors import http_error
from chanakya.api.schemas import (
    BandResponse,
    EvaluationResponse,
    MatrixRow,
    ScoreRecordResponse,
    ScoreSubmission,
    SupplierCreate,
    SupplierResponse,
    SupplierUpdate,
)
from chanakya.database import get_db
from chanakya.exceptions import ChanakyaError, ValidationError
from chanakya.scoring.aggregator import category_scores, overall_score
from chanakya.scoring.classifier import default_classifier
from chanakya.scoring.completion import category_completion, completed_keys, completion_percentage
from chanakya.scoring.criteria import SCALE_MAX, SCALE_MIN, from_ten_point
from chanakya.scoring.ranking import ALL, SORT_OVERALL, SortState, SupplierFilter, rank_suppliers
from chanakya.services.authorization import (
    AuthorizationPredicate,
    capability_token,
    ensure_authorized,
    get_create_predicate,
)
from chanakya.services.supplier_service import SupplierRepository

router = APIRouter()


def _band(score: float) -> BandResponse:
    band = default_classifier.classify(min(max(score, SCALE_MIN), SCALE_MAX))
    return BandResponse(**band.to_dict())


@router.get("/", response_model=List[SupplierResponse])
async def list_suppliers(
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """List all suppliers, newest first"""
    try:
        suppliers = await SupplierRepository(db).list_suppliers()
    except ChanakyaError as e:
        raise http_error(e)
    if status:
        suppliers = [s for s in suppliers if getattr(s.status, "value", s.status) == status]
    return [SupplierResponse.from_model(s) for s in suppliers]


@router.get("/matrix", response_model=List[MatrixRow])
async def supplier_matrix(
    search: str = "",
    score_min: float = SCALE_MIN,
    score_max: float = SCALE_MAX,
    industry: str = ALL,
    status: str = ALL,
    sort_by: str = SORT_OVERALL,
    order: str = "desc",
    tier: str = ALL,
    db: AsyncSession = Depends(get_db),
):
    """Filtered, sorted and ranked comparison matrix"""
    if order not in ("asc", "desc"):
        raise HTTPException(status_code=400, detail=f"Unknown sort order: {order}")

    try:
        suppliers = await SupplierRepository(db).list_suppliers()
    except ChanakyaError as e:
        raise http_error(e)
    supplier_filter = SupplierFilter(
        search=search,
        score_min=score_min,
        score_max=score_max,
        industry=industry,
        status=status,
    )
    try:
        ranked = rank_suppliers(
            suppliers,
            supplier_filter,
            SortState(key=sort_by, descending=(order == "desc")),
            tier=tier,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return [
        MatrixRow(
            rank=entry.rank,
            badge=entry.badge,
            overall_score=entry.overall_score,
            band=_band(entry.overall_score),
            category_scores=entry.category_scores,
            supplier=SupplierResponse.from_model(entry.supplier),
        )
        for entry in ranked
    ]


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a single supplier"""
    try:
        supplier = await SupplierRepository(db).get_supplier(supplier_id)
    except ChanakyaError as e:
        raise http_error(e)
    return SupplierResponse.from_model(supplier)


@router.get("/{supplier_id}/evaluation", response_model=EvaluationResponse)
async def get_evaluation(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Weighted score, performance band and completion for one supplier"""
    try:
        supplier = await SupplierRepository(db).get_supplier(supplier_id)
    except ChanakyaError as e:
        raise http_error(e)

    raw = supplier.raw_scores
    per_category = category_scores(raw)
    overall = overall_score(raw)
    return EvaluationResponse(
        supplier_id=supplier.id,
        overall_score=overall,
        band=_band(overall),
        category_scores=per_category,
        category_bands={tag: _band(score) for tag, score in per_category.items()},
        completion_percentage=completion_percentage(raw),
        category_completion=category_completion(raw),
        completed_criteria=completed_keys(raw),
    )


@router.get("/{supplier_id}/scores", response_model=List[ScoreRecordResponse])
async def list_scores(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Score audit trail, most recent first"""
    try:
        return await SupplierRepository(db).score_history(supplier_id)
    except ChanakyaError as e:
        raise http_error(e)


@router.post("/{supplier_id}/scores", response_model=SupplierResponse)
async def submit_scores(
    supplier_id: int,
    data: ScoreSubmission,
    db: AsyncSession = Depends(get_db),
):
    """Record sub-criterion scores; scale "ten" values are converted to 0-100"""
    if data.scale not in ("hundred", "ten"):
        raise http_error(ValidationError([f"Unknown scale: {data.scale}"]))

    scores = dict(data.scores)
    if data.scale == "ten":
        scores = {key: from_ten_point(value) for key, value in scores.items()}

    try:
        supplier = await SupplierRepository(db).set_scores(
            supplier_id,
            scores,
            evaluated_by=data.evaluated_by,
            comments=data.comments,
        )
    except ChanakyaError as e:
        raise http_error(e)
    return SupplierResponse.from_model(supplier)


@router.post("/", response_model=SupplierResponse, status_code=201)
async def create_supplier(
    data: SupplierCreate,
    db: AsyncSession = Depends(get_db),
    predicate: AuthorizationPredicate = Depends(get_create_predicate),
    token: Optional[str] = Depends(capability_token),
):
    """Create a new supplier"""
    try:
        ensure_authorized(predicate, token)
        supplier = await SupplierRepository(db).create_supplier(data.model_dump(exclude_none=True))
    except ChanakyaError as e:
        raise http_error(e)
    return SupplierResponse.from_model(supplier)


@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    data: SupplierUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a supplier"""
    try:
        supplier = await SupplierRepository(db).update_supplier(
            supplier_id, data.model_dump(exclude_none=True)
        )
    except ChanakyaError as e:
        raise http_error(e)
    return SupplierResponse.from_model(supplier)


@router.delete("/{supplier_id}")
async def delete_supplier(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a supplier and its score history"""
    try:
        await SupplierRepository(db).delete_supplier(supplier_id)
    except ChanakyaError as e:
        raise http_error(e)
    return {"message": "Supplier deleted"}
