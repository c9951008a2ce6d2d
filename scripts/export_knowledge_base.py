"""
Export Knowledge Base: write the supplier knowledge report to a markdown file,
and optionally push it to the configured knowledge-base endpoint

Usage:
    python scripts/export_knowledge_base.py [output.md] [--sync]
"""
import asyncio
import sys
from pathlib import Path

from chanakya.config import get_settings
from chanakya.database import AsyncSessionLocal, dispose_engine
from chanakya.exceptions import PersistenceError
from chanakya.services.knowledge_service import KnowledgeSyncClient, build_knowledge_report
from chanakya.services.supplier_service import SupplierRepository


async def export_knowledge_base(output_path: Path, sync: bool = False):
    """Build the report from the current database and write it out"""
    print("=" * 60)
    print("EXPORTING SUPPLIER KNOWLEDGE BASE")
    print("=" * 60)
    print()

    async with AsyncSessionLocal() as session:
        suppliers = await SupplierRepository(session).list_suppliers()
        report = build_knowledge_report(
            suppliers, top_fraction=get_settings().TOP_PERFORMER_FRACTION
        )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report, encoding="utf-8")

    print(f"Knowledge base written: {output_path}")
    print(f"   {len(suppliers)} suppliers, {len(report)} characters")

    if sync:
        try:
            await KnowledgeSyncClient().push(report)
            print("   Pushed to knowledge-base endpoint")
        except PersistenceError as e:
            print(f"   Sync failed: {e}")
            await dispose_engine()
            sys.exit(1)

    await dispose_engine()
    print()


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    output = Path(args[0]) if args else Path("docs/KNOWLEDGE_BASE.md")
    asyncio.run(export_knowledge_base(output, sync="--sync" in sys.argv[1:]))
