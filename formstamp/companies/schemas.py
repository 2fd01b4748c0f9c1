# formstamp/companies/schemas.py

from typing import Optional

from pydantic import BaseModel, ConfigDict


class CompanyResponse(BaseModel):
    """Company row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CompanyValueResponse(BaseModel):
    """One datapoint with this company's value, null when unset."""
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    value: Optional[str] = None
