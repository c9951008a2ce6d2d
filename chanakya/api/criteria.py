"""
Evaluation criteria catalog endpoints
"""
from fastapi import APIRouter

from chanakya.scoring.criteria import DEFAULT_CRITERIA, SCORING_SCALE

router = APIRouter()


@router.get("/")
async def get_criteria():
    """Weighted categories with their sub-criteria, plus the performance scale"""
    return {
        "criteria": [
            {
                "id": c.id,
                "name": c.name,
                "description": c.description,
                "weight": c.weight,
                "category": c.category,
                "sub_criteria": [
                    {
                        "key": sub.key,
                        "name": sub.name,
                        "description": sub.description,
                        "weight": sub.weight,
                    }
                    for sub in c.sub_criteria
                ],
            }
            for c in DEFAULT_CRITERIA
        ],
        "scale": [band.to_dict() for band in SCORING_SCALE],
    }
