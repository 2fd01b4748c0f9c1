# formstamp/datapoints/models.py

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from formstamp.core.db import Base


class Datapoint(Base):
    """
    A fillable field shared by every company and template.
    """
    __tablename__ = "datapoints"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Stable machine name, e.g. "invoice_date"
    key: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False, comment="Display name shown in the editor")

    def __repr__(self) -> str:
        return f"<Datapoint(id={self.id}, key={self.key})>"
