# formstamp/datapoints/router.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from formstamp.core.db import get_async_db
from formstamp.datapoints.repository import DatapointRepository
from formstamp.datapoints.schemas import DatapointResponse
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Datapoints"])


@router.get("/datapoints", response_model=List[DatapointResponse])
async def list_datapoints(db: AsyncSession = Depends(get_async_db)) -> List[DatapointResponse]:
    """
    Fillable fields, ordered by id.
    """
    return await DatapointRepository(db).list_datapoints()
