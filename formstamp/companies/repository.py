# formstamp/companies/repository.py

"""
Data Access Layer for companies and their datapoint values.
"""

from typing import Dict, List, Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from formstamp.companies.models import Company, CompanyValue
from formstamp.datapoints.models import Datapoint
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


class CompanyRepository:
    """
    Data Access Layer for Company operations.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        logger.debug("CompanyRepository initialized", session_id=id(db))

    async def list_companies(self) -> List[Company]:
        """All companies ordered by id."""
        result = await self.db.execute(select(Company).order_by(Company.id.asc()))
        return list(result.scalars().all())

    async def get_company(self, company_id: int) -> Optional[Company]:
        """Fetch a company by ID."""
        result = await self.db.execute(select(Company).where(Company.id == company_id))
        company = result.scalar_one_or_none()
        if company is None:
            logger.warning("Company not found", company_id=company_id)
        return company

    async def get_company_values(self, company_id: int) -> List[Dict[str, Optional[str]]]:
        """
        Every datapoint in registry order with this company's value.

        Left join, so datapoints without a value row come back with a null value.
        """
        stmt = (
            select(
                Datapoint.id.label("datapoint_id"),
                Datapoint.key,
                Datapoint.label,
                CompanyValue.value,
            )
            .select_from(Datapoint)
            .outerjoin(
                CompanyValue,
                and_(
                    CompanyValue.datapoint_id == Datapoint.id,
                    CompanyValue.company_id == company_id,
                ),
            )
            .order_by(Datapoint.id.asc())
        )
        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def get_values_by_datapoint(self, company_id: int) -> Dict[int, str]:
        """datapoint_id -> text value, with absent values as empty strings."""
        rows = await self.get_company_values(company_id)
        return {
            row["datapoint_id"]: "" if row["value"] is None else str(row["value"])
            for row in rows
        }
