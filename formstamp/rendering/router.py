# formstamp/rendering/router.py

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from formstamp.rendering.services import BatchRenderService
from formstamp.templates.exceptions import (
    NotFoundException, TemplateFileMissingException, ValidationException,
)
from formstamp.templates.schemas import GenerateRequest
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/templates", tags=["Generation"])


@router.post("/{template_id}/generate")
async def generate_documents(
    template_id: int,
    body: GenerateRequest,
    service: BatchRenderService = Depends(),
) -> StreamingResponse:
    """
    Render the template once per company and stream the PDFs as a zip.

    Companies that do not exist or fail to render are left out of the
    archive. An archive with no entries is still a successful response.
    """
    logger.info("Generating documents", template_id=template_id)

    try:
        job = await service.prepare(template_id, body.company_ids)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except TemplateFileMissingException as e:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=e.message) from e

    return StreamingResponse(
        service.stream(job),
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={job.archive_name}"},
    )
