# formstamp/datapoints/schemas.py

from pydantic import BaseModel, ConfigDict


class DatapointResponse(BaseModel):
    """Datapoint as listed to the editor."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    label: str
