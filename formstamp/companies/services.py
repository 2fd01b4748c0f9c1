# formstamp/companies/services.py

from typing import Dict, List, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from formstamp.companies.models import Company
from formstamp.companies.repository import CompanyRepository
from formstamp.core.db import get_async_db
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


class CompanyService:
    """Read-only company lookups for the editor."""

    def __init__(self, db: AsyncSession = Depends(get_async_db)):
        self.repo = CompanyRepository(db)

    async def list_companies(self) -> List[Company]:
        return await self.repo.list_companies()

    async def get_company_values(self, company_id: int) -> List[Dict[str, Optional[str]]]:
        """key/label/value per datapoint; value is None when unset"""
        rows = await self.repo.get_company_values(company_id)
        return [
            {"key": row["key"], "label": row["label"], "value": row["value"]}
            for row in rows
        ]
