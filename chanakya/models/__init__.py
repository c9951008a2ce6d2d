from chanakya.models.supplier import Supplier, SupplierStatus
from chanakya.models.supplier_score import SupplierScore

__all__ = [
    "Supplier",
    "SupplierStatus",
    "SupplierScore",
]
