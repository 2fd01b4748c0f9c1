# formstamp/templates/services.py

"""
Business logic for template upload and the mapping editor.

Mapping saves are permissive: numbers that cannot be read are stored as
unset and only filtered out when a document is rendered. Reads are
defensive and always return finite numbers.
"""

import asyncio
import math
from io import BytesIO
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pypdf import PdfReader
from pypdf.errors import PyPdfError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from formstamp.core.config import settings
from formstamp.core.db import get_async_db
from formstamp.datapoints.repository import DatapointRepository
from formstamp.templates.exceptions import (
    TemplateNotFoundException, ValidationException,
)
from formstamp.templates.models import PDFTemplate, TemplateMapping
from formstamp.templates.repository import TemplateRepository
from formstamp.templates.schemas import MappingResponse
from formstamp.templates.storage import TemplateStore, get_template_store
from formstamp.utils.file_utils import validate_file
from formstamp.utils.general import finite_or, page_number_or, positive_or, to_number
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


def count_pages(data: bytes) -> int:
    """Best-effort page count; 1 when the bytes do not parse."""
    try:
        return max(1, len(PdfReader(BytesIO(data)).pages))
    except (PyPdfError, ValueError, OSError) as e:
        logger.warning("Failed to read PDF page count", error_message=str(e))
        return 1


def coerce_mapping(raw: Any) -> Dict[str, Any]:
    """
    Column values for one submitted placement.

    Only datapoint_id must be usable; it is the foreign key.
    """
    if not isinstance(raw, dict):
        raise ValidationException("each mapping must be an object", {"mapping": raw})

    datapoint_id = to_number(raw.get("datapoint_id"))
    if not math.isfinite(datapoint_id) or not datapoint_id.is_integer():
        raise ValidationException(
            "datapoint_id must be an integer", {"datapoint_id": raw.get("datapoint_id")}
        )

    x = to_number(raw.get("x"))
    y = to_number(raw.get("y"))
    return {
        "datapoint_id": int(datapoint_id),
        "page": page_number_or(raw.get("page")),
        # Non-finite positions are stored as NULL and skipped at render time
        "x": x if math.isfinite(x) else None,
        "y": y if math.isfinite(y) else None,
        "font_size": positive_or(raw.get("font_size"), settings.default_font_size),
    }


def to_mapping_response(mapping: TemplateMapping) -> MappingResponse:
    """Stored placement with unreadable numbers replaced by safe defaults."""
    return MappingResponse(
        id=mapping.id,
        template_id=mapping.template_id,
        datapoint_id=mapping.datapoint_id,
        page=page_number_or(mapping.page),
        x=finite_or(mapping.x, 0.0),
        y=finite_or(mapping.y, 0.0),
        font_size=positive_or(mapping.font_size, settings.default_font_size),
    )


class MappingService:
    """
    Mapping editor: replace-all saves and sanitized reads for one template.
    """

    def __init__(self, db: AsyncSession = Depends(get_async_db)):
        self.db = db
        self.templates = TemplateRepository(db)
        self.datapoints = DatapointRepository(db)

    async def save_mappings(self, template_id: int, mappings: Any) -> int:
        """
        Replace the template's whole mapping set. An empty list clears it.
        """
        if not isinstance(mappings, list):
            raise ValidationException("mappings array required")

        template = await self.templates.get_template(template_id)
        if template is None:
            raise TemplateNotFoundException(template_id)

        rows = [coerce_mapping(raw) for raw in mappings]

        known = await self.datapoints.existing_ids([row["datapoint_id"] for row in rows])
        unknown = sorted({row["datapoint_id"] for row in rows} - known)
        if unknown:
            raise ValidationException("unknown datapoint_id", {"datapoint_ids": unknown})

        try:
            count = await self.templates.replace_mappings(template_id, rows)
        except IntegrityError as e:
            raise ValidationException("mapping violates a constraint", {"error": str(e.orig)}) from e

        logger.info("Mappings saved", template_id=template_id, count=count)
        return count

    async def get_mappings(self, template_id: int) -> List[MappingResponse]:
        """Current set in insertion order with finite numbers."""
        mappings = await self.templates.get_mappings(template_id)
        return [to_mapping_response(mapping) for mapping in mappings]


class TemplateService:
    """
    Template upload and listing.
    """

    def __init__(
        self,
        db: AsyncSession = Depends(get_async_db),
        store: TemplateStore = Depends(get_template_store),
    ):
        self.repo = TemplateRepository(db)
        self.store = store

    async def upload_template(self, filename: Optional[str], data: bytes) -> PDFTemplate:
        """Store the bytes and record the template with its page count."""
        is_valid, error = validate_file(filename, len(data))
        if not is_valid:
            logger.error("Invalid file", error_message=error)
            raise ValidationException(error, {"filename": filename})

        pages = await asyncio.to_thread(count_pages, data)
        stored_path = await asyncio.to_thread(self.store.store, data, filename)
        return await self.repo.create_template(filename, stored_path, pages)

    async def list_templates(self) -> List[PDFTemplate]:
        """Templates, newest first."""
        return await self.repo.list_templates()
