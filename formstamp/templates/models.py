# formstamp/templates/models.py

"""
SQLAlchemy 2.x models for uploaded PDF templates and their field placements.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formstamp.core.db import Base


class PDFTemplate(Base):
    """
    Uploaded source document used as the stencil for generated PDFs.
    """
    __tablename__ = "pdf_templates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    original_filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Opaque key assigned by the template store at upload time
    stored_path: Mapped[str] = mapped_column(String(512), nullable=False)

    # Page count read at upload; advisory only, rendering re-reads the bytes
    pages: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    mappings: Mapped[List["TemplateMapping"]] = relationship(
        "TemplateMapping",
        back_populates="template",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TemplateMapping.id",
    )

    def __repr__(self) -> str:
        return (
            f"<PDFTemplate(id={self.id}, "
            f"original_filename={self.original_filename}, "
            f"pages={self.pages})>"
        )


class TemplateMapping(Base):
    """
    Placement of one datapoint on one page at normalized coordinates.

    x and y are fractions of the page width/height measured from the top-left
    corner. They are stored as sent by the editor, so they may be null or out
    of range; readers sanitize them.
    """
    __tablename__ = "pdf_mappings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    template_id: Mapped[int] = mapped_column(
        ForeignKey("pdf_templates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    datapoint_id: Mapped[int] = mapped_column(
        ForeignKey("datapoints.id", ondelete="CASCADE"), nullable=False
    )
    page: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    x: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    y: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    font_size: Mapped[Optional[float]] = mapped_column(Float, default=12, nullable=True)

    template: Mapped["PDFTemplate"] = relationship("PDFTemplate", back_populates="mappings")

    def __repr__(self) -> str:
        return (
            f"<TemplateMapping(id={self.id}, template_id={self.template_id}, "
            f"datapoint_id={self.datapoint_id}, page={self.page})>"
        )
