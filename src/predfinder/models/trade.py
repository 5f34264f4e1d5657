"""Trade - raw tick from the data API."""

from pydantic import BaseModel, ConfigDict, Field


class Trade(BaseModel):
    """Executed trade on one outcome of a condition."""

    model_config = ConfigDict(frozen=True)

    condition_id: str = ""
    outcome_index: int
    timestamp: int  # unix seconds
    price: float = Field(..., ge=0, le=1)
    size: float = Field(0.0, ge=0)
    side: str | None = None
