"""
Builders for supplier rows used across the test modules
"""
from chanakya.models.supplier import Supplier, SupplierStatus
from chanakya.scoring.criteria import all_score_keys


def make_supplier(name, industry="Technology", status=SupplierStatus.ACTIVE, score=0.0, **kwargs):
    """Supplier with every sub-criterion set to the same score"""
    fields = {
        "name": name,
        "contact_person": "Pat Lee",
        "email": f"{name.split()[0].lower()}@example.com",
        "phone": "555-0100",
        "industry": industry,
        "status": status,
        "certifications": [],
    }
    fields.update({key: float(score) for key in all_score_keys()})
    fields.update(kwargs)
    supplier = Supplier(**fields)
    supplier.refresh_overall_score()
    return supplier
