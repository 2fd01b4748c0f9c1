# formstamp/rendering/services.py

"""
Batch generation: one filled PDF per company, streamed as a zip archive.

prepare() performs every check that can still be reported as a normal error
response. stream() runs after the response has started, so its only failure
mode is an aborted transfer.
"""

import asyncio
import math
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, List, Tuple

from fastapi import Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from formstamp.companies.repository import CompanyRepository
from formstamp.core.config import Settings, get_settings
from formstamp.core.db import get_session_factory
from formstamp.rendering.archive import StreamingArchive
from formstamp.rendering.renderer import Placement, render_document
from formstamp.templates.exceptions import (
    CompanyNotFoundException, RenderFailureException, StreamFailureException,
    TemplateFileMissingException, TemplateNotFoundException, ValidationException,
)
from formstamp.templates.repository import TemplateRepository
from formstamp.templates.storage import TemplateStore, get_template_store
from formstamp.utils.general import safe_filename, to_number
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BatchJob:
    """Everything loaded before the first byte is streamed."""
    template_id: int
    company_ids: List[int]
    template_bytes: bytes
    placements: List[Placement]
    timeout_seconds: float
    rendered: int = 0
    skipped: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def archive_name(self) -> str:
        return f"generated_{self.template_id}.zip"


def validate_company_ids(company_ids: Any) -> List[int]:
    """Non-empty list of integer ids, in request order."""
    if not isinstance(company_ids, list) or not company_ids:
        raise ValidationException("companyIds required")

    ids = []
    for company_id in company_ids:
        # 1.5 is rejected rather than truncated to another company
        number = to_number(company_id)
        if not math.isfinite(number) or not number.is_integer():
            raise ValidationException("companyIds must be integers", {"company_id": company_id})
        ids.append(int(number))
    return ids


class BatchRenderService:
    """
    Renders a template for many companies into one streamed archive.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker = Depends(get_session_factory),
        store: TemplateStore = Depends(get_template_store),
        config: Settings = Depends(get_settings),
    ):
        self.session_factory = session_factory
        self.store = store
        self.config = config
        self.font_name = config.default_font_name
        self.font_size = config.default_font_size
        self.compression_level = config.archive_compression_level

    def timeout_for(self, company_count: int) -> float:
        """Rendering is linear in the number of companies."""
        return (
            self.config.generate_timeout_base_seconds
            + self.config.generate_timeout_per_company_seconds * company_count
        )

    async def prepare(self, template_id: int, company_ids: Any) -> BatchJob:
        """
        Resolve the template, its bytes and its mapping set.

        Raises ValidationException, TemplateNotFoundException or
        TemplateFileMissingException; nothing has been streamed yet.
        """
        ids = validate_company_ids(company_ids)

        async with self.session_factory() as session:
            templates = TemplateRepository(session)
            template = await templates.get_template(template_id)
            if template is None:
                raise TemplateNotFoundException(template_id)

            try:
                template_bytes = await asyncio.to_thread(self.store.read, template.stored_path)
            except TemplateFileMissingException as e:
                # The row exists, so the bytes were lost (e.g. storage reset)
                raise TemplateFileMissingException(template.stored_path, template_id) from e

            # Mappings are template scoped: loaded once for the whole batch
            mappings = await templates.get_mappings(template_id)
            placements = [
                Placement.from_mapping(mapping, self.font_size)
                for mapping in mappings
            ]

        logger.info(
            "Batch prepared",
            template_id=template_id,
            companies=len(ids),
            placements=len(placements),
        )
        return BatchJob(
            template_id=template_id,
            company_ids=ids,
            template_bytes=template_bytes,
            placements=placements,
            timeout_seconds=self.timeout_for(len(ids)),
        )

    async def render_company(
        self, job: BatchJob, companies: CompanyRepository, company_id: int
    ) -> Tuple[str, bytes]:
        """
        (company name, pdf bytes) for one company.

        Raises CompanyNotFoundException when the company does not exist and
        RenderFailureException when anything else goes wrong.
        """
        try:
            company = await companies.get_company(company_id)
        except Exception as e:
            raise RenderFailureException(company_id, str(e)) from e
        if company is None:
            raise CompanyNotFoundException(company_id)

        try:
            values = await companies.get_values_by_datapoint(company_id)
            # Fresh parse per company inside the worker thread
            pdf_bytes = await asyncio.to_thread(
                render_document,
                job.template_bytes,
                job.placements,
                values,
                self.font_name,
            )
        except Exception as e:
            raise RenderFailureException(company_id, str(e)) from e
        return company.name, pdf_bytes

    async def stream(self, job: BatchJob) -> AsyncIterator[bytes]:
        """
        Archive bytes, one company at a time, in request order.

        A missing company or a failed render leaves that company out of the
        archive. Archive errors and the request deadline abort the stream.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + job.timeout_seconds
        used_names = set()

        logger.info("Batch started", template_id=job.template_id, companies=len(job.company_ids))
        try:
            async with self.session_factory() as session:
                companies = CompanyRepository(session)
                with StreamingArchive(self.compression_level) as archive:
                    for company_id in job.company_ids:
                        if loop.time() > deadline:
                            raise StreamFailureException(
                                "batch generation timed out",
                                {"template_id": job.template_id, "timeout": job.timeout_seconds},
                            )

                        try:
                            name, pdf_bytes = await self.render_company(job, companies, company_id)
                        except CompanyNotFoundException:
                            logger.info("Company not found, skipped", company_id=company_id)
                            job.skipped.append(company_id)
                            continue
                        except RenderFailureException as e:
                            logger.error(
                                "Company render failed",
                                template_id=job.template_id,
                                company_id=company_id,
                                error_message=e.message,
                                exc_info=True,
                            )
                            job.failed.append(company_id)
                            continue

                        archive.append(safe_filename(name, company_id, used_names), pdf_bytes)
                        job.rendered += 1

                        chunk = archive.drain()
                        if chunk:
                            yield chunk

                    archive.finalize()
                    tail = archive.drain()
                    if tail:
                        yield tail
        except (asyncio.CancelledError, GeneratorExit):
            logger.warning(
                "Batch cancelled by client",
                template_id=job.template_id,
                rendered=job.rendered,
            )
            raise
        except StreamFailureException as e:
            logger.error("Batch stream failed", template_id=job.template_id, error_message=e.message)
            raise
        except Exception as e:
            logger.error("Batch stream failed", template_id=job.template_id, error_message=str(e), exc_info=True)
            raise StreamFailureException(str(e), {"template_id": job.template_id}) from e

        logger.info(
            "Batch completed",
            template_id=job.template_id,
            rendered=job.rendered,
            skipped=len(job.skipped),
            failed=len(job.failed),
        )
