# formstamp/templates/schemas.py

"""
Pydantic schemas for templates, mappings and generation requests.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TemplateResponse(BaseModel):
    """Template row as returned after upload and in listings."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    original_filename: Optional[str] = None
    stored_path: str
    pages: int
    created_at: Optional[datetime] = None


class MappingSaveRequest(BaseModel):
    """
    Body of a mapping save. The list is validated by the mapping editor
    so that malformed numbers are stored rather than rejected.
    """
    mappings: Any = None


class MappingResponse(BaseModel):
    """Stored placement with every numeric field finite."""
    id: int
    template_id: int
    datapoint_id: int
    page: int
    x: float
    y: float
    font_size: float


class GenerateRequest(BaseModel):
    """Body of a batch generation request."""
    model_config = ConfigDict(populate_by_name=True)

    company_ids: Any = Field(None, alias="companyIds")


class OkResponse(BaseModel):
    """Acknowledgement body."""
    ok: bool = True
