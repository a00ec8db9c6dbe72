"""
Confidence decay job report.
"""

from pydantic import BaseModel, ConfigDict, Field


class DecayReport(BaseModel):
    """Counts reported after one decay pass."""

    model_config = ConfigDict(populate_by_name=True)

    processed: int = Field(..., ge=0, description="Notes scanned")
    updated: int = Field(..., ge=0, description="Notes whose confidence was lowered")
    decay_rate: float = Field(..., serialization_alias="decayRate")
