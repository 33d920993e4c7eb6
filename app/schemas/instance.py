from pydantic import BaseModel, ConfigDict, Field


class Instance(BaseModel):
    """One monitored remote endpoint."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique instance identifier")
    name: str = Field(..., description="Display name")
    url: str = Field(..., description="Health-check URL")
