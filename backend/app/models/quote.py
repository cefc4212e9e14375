from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class DesignQuote(SQLModel, table=True):
    """A priced snapshot of a design at a given order quantity."""

    id: Optional[int] = Field(default=None, primary_key=True)
    design_id: str = Field(index=True)
    quantity: int
    total_additional_price: int
    # PricingSummary serialized as camelCase JSON
    summary: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
