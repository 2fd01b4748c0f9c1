# formstamp/templates/router.py

"""
FastAPI router for template upload and the mapping editor.
"""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from formstamp.templates.exceptions import NotFoundException, ValidationException
from formstamp.templates.schemas import (
    MappingResponse, MappingSaveRequest, OkResponse, TemplateResponse,
)
from formstamp.templates.services import MappingService, TemplateService
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/templates",
    tags=["Templates"],
    responses={404: {"description": "Not found"}},
)


@router.post("/upload", response_model=TemplateResponse)
async def upload_template(
    file: UploadFile = File(default=None),
    service: TemplateService = Depends(),
) -> TemplateResponse:
    """
    Upload a PDF template. The page count is read on a best-effort basis.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file")

    data = await file.read()
    logger.info("Uploading template", filename=file.filename, size=len(data))

    try:
        return await service.upload_template(file.filename, data)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e


@router.get("", response_model=List[TemplateResponse])
async def list_templates(service: TemplateService = Depends()) -> List[TemplateResponse]:
    """
    Templates, newest first.
    """
    return await service.list_templates()


@router.post("/{template_id}/mappings", response_model=OkResponse)
async def save_mappings(
    template_id: int,
    body: MappingSaveRequest,
    service: MappingService = Depends(),
) -> OkResponse:
    """
    Replace every placement of the template with the submitted list.
    """
    logger.info("Saving mappings", template_id=template_id)

    try:
        await service.save_mappings(template_id, body.mappings)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except ValidationException as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": e.message, **e.details},
        ) from e
    return OkResponse()


@router.get("/{template_id}/mappings", response_model=List[MappingResponse])
async def get_mappings(
    template_id: int,
    service: MappingService = Depends(),
) -> List[MappingResponse]:
    """
    Placements of the template in insertion order.
    """
    return await service.get_mappings(template_id)
