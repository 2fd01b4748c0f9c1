# formstamp/companies/models.py

"""
SQLAlchemy 2.x models for the records merged into templates.
"""

from typing import List, Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formstamp.core.db import Base


class Company(Base):
    """
    One data subject; a batch renders one document per company.
    """
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    values: Mapped[List["CompanyValue"]] = relationship(
        "CompanyValue",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name})>"


class CompanyValue(Base):
    """
    Value of one datapoint for one company. A missing row reads as null.
    """
    __tablename__ = "company_values"

    __table_args__ = (
        UniqueConstraint("company_id", "datapoint_id", name="uq_company_datapoint"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    datapoint_id: Mapped[int] = mapped_column(
        ForeignKey("datapoints.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    company: Mapped["Company"] = relationship("Company", back_populates="values")

    def __repr__(self) -> str:
        return (
            f"<CompanyValue(company_id={self.company_id}, "
            f"datapoint_id={self.datapoint_id})>"
        )
