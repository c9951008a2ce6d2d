"""
Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from chanakya.config import get_settings
from chanakya.database import AsyncSessionLocal, create_tables, dispose_engine
from chanakya.models import Supplier, SupplierScore, SupplierStatus
from chanakya.scoring.criteria import find_criterion
from chanakya.utils.helpers import utcnow
from chanakya.utils.logger import get_logger
from chanakya.api import analytics, criteria, imports, knowledge, suppliers, voice

settings = get_settings()
# Handler on the package logger; module loggers propagate to it
logger = get_logger("chanakya")


DEMO_SUPPLIERS = [
    {
        "name": "TechFlow Solutions",
        "contact_person": "John Anderson",
        "email": "j.anderson@techflow.com",
        "phone": "+1-555-0123",
        "address": "123 Business Park, San Francisco, CA 94105",
        "industry": "Technology Components",
        "established_year": 2010,
        "certifications": ["ISO 9001", "ISO 14001", "SOC 2"],
        "status": "active",
        "evaluated_by": "Alice Johnson",
        "scores": {"quality": 85, "cost": 78, "leadTime": 92, "sustainability": 75, "reliability": 88},
    },
    {
        "name": "Global Manufacturing Corp",
        "contact_person": "Sarah Chen",
        "email": "s.chen@globalmanuf.com",
        "phone": "+1-555-0124",
        "address": "456 Industrial Ave, Detroit, MI 48201",
        "industry": "Manufacturing",
        "established_year": 1995,
        "certifications": ["ISO 9001", "IATF 16949", "ISO 45001"],
        "status": "active",
        "evaluated_by": "Bob Wilson",
        "scores": {"quality": 92, "cost": 82, "leadTime": 88, "sustainability": 70, "reliability": 90},
    },
    {
        "name": "EcoSupply Partners",
        "contact_person": "Michael Rodriguez",
        "email": "m.rodriguez@ecosupply.com",
        "phone": "+1-555-0125",
        "address": "789 Green Valley Rd, Austin, TX 78701",
        "industry": "Sustainable Materials",
        "established_year": 2018,
        "certifications": ["B Corp", "FSC", "Fair Trade"],
        "status": "active",
        "evaluated_by": "Carol Davis",
        "scores": {"quality": 80, "cost": 85, "leadTime": 75, "sustainability": 95, "reliability": 82},
    },
    {
        "name": "Precision Components Ltd",
        "contact_person": "Emma Thompson",
        "email": "e.thompson@precision.com",
        "phone": "+1-555-0126",
        "address": "321 Manufacturing Dr, Cleveland, OH 44101",
        "industry": "Precision Engineering",
        "established_year": 2005,
        "certifications": ["ISO 9001", "AS9100"],
        "status": "pending",
        "evaluated_by": None,
        "scores": {},
    },
]


async def seed_demo_suppliers(session) -> int:
    """Insert the demo suppliers when the table is empty; returns rows added"""
    result = await session.execute(select(Supplier))
    if result.scalars().first():
        return 0

    for entry in DEMO_SUPPLIERS:
        data = dict(entry)
        category_values = data.pop("scores")
        evaluated_by = data.pop("evaluated_by")
        data["status"] = SupplierStatus(data["status"])

        supplier = Supplier(**data)
        for tag, value in category_values.items():
            for key in find_criterion(tag).keys:
                setattr(supplier, key, float(value))
        supplier.refresh_overall_score()
        session.add(supplier)
        await session.flush()

        for tag, value in category_values.items():
            for key in find_criterion(tag).keys:
                session.add(SupplierScore(
                    supplier_id=supplier.id,
                    criterion_key=key,
                    score=float(value),
                    evaluated_by=evaluated_by,
                    evaluated_at=utcnow(),
                ))

    await session.commit()
    return len(DEMO_SUPPLIERS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("Database tables created")

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            added = await seed_demo_suppliers(session)
            if added:
                logger.info(f"Seeded {added} demo suppliers")

    yield

    await dispose_engine()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(criteria.router, prefix="/api/criteria", tags=["Criteria"])
app.include_router(suppliers.router, prefix="/api/suppliers", tags=["Suppliers"])
app.include_router(imports.router, prefix="/api/imports", tags=["Imports"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(knowledge.router, prefix="/api/knowledge", tags=["Knowledge"])
app.include_router(voice.router, prefix="/api/voice", tags=["Voice"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "chanakya.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
