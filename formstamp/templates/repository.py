# formstamp/templates/repository.py

"""
Data Access Layer for PDF templates and their mapping sets.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from formstamp.templates.models import PDFTemplate, TemplateMapping
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


class TemplateRepository:
    """
    Data Access Layer for template and mapping operations.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        logger.debug("TemplateRepository initialized", session_id=id(db))

    async def create_template(
        self, original_filename: Optional[str], stored_path: str, pages: int
    ) -> PDFTemplate:
        """Insert a template row."""
        template = PDFTemplate(
            original_filename=original_filename,
            stored_path=stored_path,
            pages=pages,
        )
        self.db.add(template)
        await self.db.flush()
        await self.db.refresh(template)

        logger.info("Template created", template_id=template.id, pages=pages)
        return template

    async def list_templates(self) -> List[PDFTemplate]:
        """Templates, newest first."""
        stmt = select(PDFTemplate).order_by(PDFTemplate.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_template(self, template_id: int) -> Optional[PDFTemplate]:
        """Fetch a template by ID."""
        result = await self.db.execute(select(PDFTemplate).where(PDFTemplate.id == template_id))
        template = result.scalar_one_or_none()
        if template is None:
            logger.warning("Template not found", template_id=template_id)
        return template

    async def get_mappings(self, template_id: int) -> List[TemplateMapping]:
        """Mappings for a template in insertion order."""
        stmt = (
            select(TemplateMapping)
            .where(TemplateMapping.template_id == template_id)
            .order_by(TemplateMapping.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def replace_mappings(
        self, template_id: int, mappings: List[Dict[str, Any]]
    ) -> int:
        """
        Delete every mapping of the template and insert the new set.

        Both statements share one transaction which is committed here, so a
        reader sees either the old set or the new one, never an empty set.
        """
        try:
            await self.db.execute(
                delete(TemplateMapping).where(TemplateMapping.template_id == template_id)
            )
            self.db.add_all(
                [TemplateMapping(template_id=template_id, **mapping) for mapping in mappings]
            )
            await self.db.flush()
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error("Mapping replace rolled back", template_id=template_id, error_message=str(e))
            raise

        logger.info("Mappings replaced", template_id=template_id, count=len(mappings))
        return len(mappings)
