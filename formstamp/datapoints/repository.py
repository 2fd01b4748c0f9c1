# formstamp/datapoints/repository.py

from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from formstamp.datapoints.models import Datapoint
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


class DatapointRepository:
    """
    Read access to the datapoint registry.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_datapoints(self) -> List[Datapoint]:
        """All datapoints ordered by id."""
        result = await self.db.execute(select(Datapoint).order_by(Datapoint.id.asc()))
        return list(result.scalars().all())

    async def existing_ids(self, datapoint_ids: Sequence[int]) -> set:
        """Subset of the given ids that exist."""
        if not datapoint_ids:
            return set()
        stmt = select(Datapoint.id).where(Datapoint.id.in_(set(datapoint_ids)))
        result = await self.db.execute(stmt)
        return set(result.scalars().all())
