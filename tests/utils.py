import io
import zipfile
from typing import Dict, List, Optional, Sequence, Tuple

from pypdf import PdfReader, PdfWriter
from sqlalchemy.orm import Session

from formstamp.companies.models import Company, CompanyValue
from formstamp.datapoints.models import Datapoint
from formstamp.templates.models import PDFTemplate, TemplateMapping
from formstamp.templates.storage import TemplateStore

LETTER = (612.0, 792.0)


def make_pdf(page_sizes: Sequence[Tuple[float, float]] = (LETTER,)) -> bytes:
    """Blank PDF with one page per size."""
    writer = PdfWriter()
    for width, height in page_sizes:
        writer.add_blank_page(width=width, height=height)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_texts(pdf_bytes: bytes) -> List[str]:
    return [page.extract_text() or "" for page in PdfReader(io.BytesIO(pdf_bytes)).pages]


def read_zip(content: bytes) -> Dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


def zip_names(content: bytes) -> List[str]:
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        return archive.namelist()


def add_datapoint(db: Session, key: str, label: Optional[str] = None) -> Datapoint:
    datapoint = Datapoint(key=key, label=label or key.replace("_", " ").title())
    db.add(datapoint)
    db.commit()
    return datapoint


def add_company(db: Session, name: str, values: Optional[Dict[int, Optional[str]]] = None) -> Company:
    company = Company(name=name)
    db.add(company)
    db.flush()
    for datapoint_id, value in (values or {}).items():
        db.add(CompanyValue(company_id=company.id, datapoint_id=datapoint_id, value=value))
    db.commit()
    return company


def add_template(
    db: Session,
    store: TemplateStore,
    pdf_bytes: Optional[bytes] = None,
    pages: int = 1,
    filename: str = "form.pdf",
) -> PDFTemplate:
    stored_path = store.store(pdf_bytes if pdf_bytes is not None else make_pdf(), filename)
    template = PDFTemplate(original_filename=filename, stored_path=stored_path, pages=pages)
    db.add(template)
    db.commit()
    return template


def add_mapping(
    db: Session,
    template_id: int,
    datapoint_id: int,
    x: Optional[float] = 0.5,
    y: Optional[float] = 0.5,
    page: int = 1,
    font_size: Optional[float] = 12,
) -> TemplateMapping:
    mapping = TemplateMapping(
        template_id=template_id,
        datapoint_id=datapoint_id,
        page=page,
        x=x,
        y=y,
        font_size=font_size,
    )
    db.add(mapping)
    db.commit()
    return mapping
