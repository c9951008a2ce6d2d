"""
Supplier persistence service.

Wraps the async session with the create/read/update/delete/bulk-create
operations used by the API, the importer and the voice agent. Every write
recomputes ``overall_score`` from the sub-criteria columns and bumps
``updated_at``. Store failures surface as PersistenceError; nothing is retried.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chanakya.exceptions import (
    BulkCreateError,
    ChanakyaError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from chanakya.models.supplier import Supplier, SupplierStatus
from chanakya.models.supplier_score import SupplierScore
from chanakya.scoring.criteria import all_score_keys
from chanakya.utils.helpers import utcnow
from chanakya.utils.validators import dedupe_certifications, validate_supplier_data

logger = logging.getLogger(__name__)

PROFILE_FIELDS = [
    "name",
    "description",
    "contact_person",
    "email",
    "phone",
    "address",
    "website",
    "industry",
    "established_year",
    "certifications",
    "status",
]

EDITABLE_FIELDS = PROFILE_FIELDS + all_score_keys()


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only editable fields; normalise certifications and strip text"""
    cleaned = {}
    for key, value in data.items():
        if key not in EDITABLE_FIELDS:
            continue
        if isinstance(value, str) and key != "status":
            value = value.strip()
        if key == "certifications":
            value = dedupe_certifications(value)
        if isinstance(value, SupplierStatus):
            value = value.value
        cleaned[key] = value
    return cleaned


class SupplierRepository:
    """Persistence collaborator for supplier records"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise PersistenceError(f"Failed to {action}", cause=e) from e

    async def list_suppliers(self) -> List[Supplier]:
        """All suppliers, newest first"""
        try:
            result = await self.db.execute(
                select(Supplier).order_by(Supplier.created_at.desc(), Supplier.id.desc())
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list suppliers", cause=e) from e
        return list(result.scalars().all())

    async def get_supplier(self, supplier_id: int) -> Supplier:
        try:
            result = await self.db.execute(
                select(Supplier).where(Supplier.id == supplier_id)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load supplier", cause=e) from e
        supplier = result.scalar_one_or_none()
        if not supplier:
            raise NotFoundError("Supplier", supplier_id)
        return supplier

    async def find_by_name(self, name: str) -> Optional[Supplier]:
        """
        Earliest-created supplier whose name contains the fragment or is
        contained in it, case-insensitive.
        """
        needle = (name or "").strip().lower()
        if not needle:
            return None
        try:
            result = await self.db.execute(
                select(Supplier).order_by(Supplier.created_at.asc(), Supplier.id.asc())
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to search suppliers", cause=e) from e
        for supplier in result.scalars():
            candidate = supplier.name.lower()
            if needle in candidate or candidate in needle:
                return supplier
        return None

    async def create_supplier(self, data: Dict[str, Any]) -> Supplier:
        payload = _clean(data)
        errors = validate_supplier_data(payload)
        if errors:
            raise ValidationError(errors)

        payload.setdefault("status", SupplierStatus.PENDING.value)
        payload.setdefault("certifications", [])
        payload["status"] = SupplierStatus(payload["status"])
        for key in all_score_keys():
            if payload.get(key) is None:
                payload[key] = 0.0

        now = utcnow()
        supplier = Supplier(**payload, created_at=now, updated_at=now)
        supplier.refresh_overall_score()
        self.db.add(supplier)

        await self._commit("create supplier")
        await self.db.refresh(supplier)
        logger.info(f"Created supplier {supplier.id} ({supplier.name})")
        return supplier

    async def update_supplier(self, supplier_id: int, data: Dict[str, Any]) -> Supplier:
        supplier = await self.get_supplier(supplier_id)
        updates = _clean(data)
        errors = validate_supplier_data(updates, partial=True)
        if errors:
            raise ValidationError(errors)

        for key, value in updates.items():
            if key == "status":
                value = SupplierStatus(value)
            elif key in all_score_keys() and value is None:
                value = 0.0
            setattr(supplier, key, value)

        supplier.refresh_overall_score()
        supplier.updated_at = utcnow()

        await self._commit("update supplier")
        await self.db.refresh(supplier)
        logger.info(f"Updated supplier {supplier.id} ({supplier.name})")
        return supplier

    async def delete_supplier(self, supplier_id: int) -> None:
        """Hard delete; the score history goes with it"""
        supplier = await self.get_supplier(supplier_id)
        await self.db.execute(
            delete(SupplierScore).where(SupplierScore.supplier_id == supplier_id)
        )
        await self.db.delete(supplier)
        await self._commit("delete supplier")
        logger.info(f"Deleted supplier {supplier_id}")

    async def bulk_create_suppliers(self, rows: Iterable[Dict[str, Any]]) -> List[Supplier]:
        """
        Insert rows one at a time, committing each. A failure stops the batch
        with BulkCreateError; rows already committed stay inserted and are
        listed on the error.
        """
        created = []
        for index, row in enumerate(rows, start=1):
            try:
                supplier = await self.create_supplier(row)
            except ChanakyaError as e:
                logger.error(f"Bulk create stopped at record {index} after {len(created)} inserted")
                raise BulkCreateError(created, index, e) from e
            created.append(supplier)
        logger.info(f"Bulk created {len(created)} suppliers")
        return created

    async def set_criterion_score(
        self,
        supplier_id: int,
        criterion_key: str,
        score: float,
        evaluated_by: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> Supplier:
        """Set one sub-criterion score and append it to the audit trail"""
        return await self.set_scores(
            supplier_id, {criterion_key: score}, evaluated_by=evaluated_by, comments=comments
        )

    async def set_scores(
        self,
        supplier_id: int,
        scores: Dict[str, float],
        evaluated_by: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> Supplier:
        unknown = [key for key in scores if key not in all_score_keys()]
        if unknown:
            raise ValidationError([f"Unknown criterion: {key}" for key in unknown])

        supplier = await self.get_supplier(supplier_id)
        errors = validate_supplier_data(scores, partial=True)
        if errors:
            raise ValidationError(errors)

        for key, value in scores.items():
            setattr(supplier, key, value)
            self.db.add(SupplierScore(
                supplier_id=supplier.id,
                criterion_key=key,
                score=value,
                comments=comments,
                evaluated_by=evaluated_by,
                evaluated_at=utcnow(),
            ))

        supplier.refresh_overall_score()
        supplier.updated_at = utcnow()

        await self._commit("record scores")
        await self.db.refresh(supplier)
        logger.info(f"Recorded {len(scores)} score(s) for supplier {supplier.id}")
        return supplier

    async def score_history(self, supplier_id: int) -> List[SupplierScore]:
        await self.get_supplier(supplier_id)
        result = await self.db.execute(
            select(SupplierScore)
            .where(SupplierScore.supplier_id == supplier_id)
            .order_by(SupplierScore.evaluated_at.desc(), SupplierScore.id.desc())
        )
        return list(result.scalars().all())
