# formstamp/companies/router.py

from typing import List

from fastapi import APIRouter, Depends

from formstamp.companies.schemas import CompanyResponse, CompanyValueResponse
from formstamp.companies.services import CompanyService
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Companies"])


@router.get("/companies", response_model=List[CompanyResponse])
async def list_companies(service: CompanyService = Depends()) -> List[CompanyResponse]:
    """
    Companies ordered by id.
    """
    return await service.list_companies()


@router.get("/company/{company_id}/values", response_model=List[CompanyValueResponse])
async def get_company_values(
    company_id: int,
    service: CompanyService = Depends(),
) -> List[CompanyValueResponse]:
    """
    Every datapoint with this company's value; unset values are null.
    """
    logger.info("Getting company values", company_id=company_id)
    return await service.get_company_values(company_id)
