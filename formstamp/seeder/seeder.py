# formstamp/seeder/seeder.py

"""
Demo data: ten datapoints and ten companies with one value each.

Run with `python -m formstamp.seeder.seeder`. Existing companies,
datapoints, templates and mappings are removed first.
"""

import asyncio
from typing import Dict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from formstamp.companies.models import Company, CompanyValue
from formstamp.core.db import AsyncSessionLocal, init_models
from formstamp.datapoints.models import Datapoint
from formstamp.templates.models import PDFTemplate, TemplateMapping
from formstamp.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

DATAPOINTS = [
    ("company_name", "Company Name"),
    ("contact_name", "Contact Name"),
    ("invoice_date", "Invoice Date"),
    ("amount_due", "Amount Due"),
    ("due_date", "Due Date"),
    ("address", "Address"),
    ("city", "City"),
    ("state", "State"),
    ("postal_code", "Postal Code"),
    ("phone", "Phone"),
]

COMPANY_COUNT = 10


def company_values(i: int) -> Dict[str, str]:
    """Values for the i-th demo company (1-based)."""
    name = f"Company {i}"
    return {
        "company_name": name,
        "contact_name": f"Contact {i}",
        "invoice_date": f"2025-0{(i % 9) + 1}-0{(i % 27) + 1}",
        "amount_due": f"{1000 + i * 37:.2f}",
        "due_date": f"2025-12-{(i % 27) + 1}",
        "address": f"{i} Main St",
        "city": "Metropolis",
        "state": "CA",
        "postal_code": f"{i:02d}01",
        "phone": f"(555) 010-{i:04d}",
    }


async def clear_data(db: AsyncSession) -> None:
    """Remove rows children first so no cascade support is needed."""
    for model in (TemplateMapping, PDFTemplate, CompanyValue, Company, Datapoint):
        await db.execute(delete(model))
    await db.flush()


async def seed(db: AsyncSession) -> None:
    """Replace all data with the demo set."""
    await clear_data(db)

    db.add_all([Datapoint(key=key, label=label) for key, label in DATAPOINTS])
    await db.flush()

    result = await db.execute(select(Datapoint).order_by(Datapoint.id.asc()))
    datapoints = result.scalars().all()

    for i in range(1, COMPANY_COUNT + 1):
        company = Company(name=f"Company {i}")
        db.add(company)
        await db.flush()

        values = company_values(i)
        db.add_all([
            CompanyValue(
                company_id=company.id,
                datapoint_id=datapoint.id,
                value=values.get(datapoint.key) or f"Value {i}-{datapoint.id}",
            )
            for datapoint in datapoints
        ])

    await db.flush()
    logger.info("Seeded mock data", datapoints=len(datapoints), companies=COMPANY_COUNT)


async def main() -> None:
    await init_models()
    async with AsyncSessionLocal() as db:
        try:
            await seed(db)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Seeding failed", error_message=str(e))
            raise


if __name__ == "__main__":
    setup_logging(use_json=False)
    asyncio.run(main())
