"""Summary Record model: the derived summary and concepts of one Content Item."""

from datetime import datetime

from pydantic import BaseModel, Field


class SummaryRecord(BaseModel):
    """
    AI-derived enrichment for exactly one Content Item.

    Overwritten in place when the content is edited; deleted together
    with its Content Item.
    """

    id: str = Field(..., description="Unique summary ID (sum_xxx)")
    content_id: str = Field(..., description="Content Item this record belongs to (1:1)")
    summary: str = Field(..., description="Short natural-language summary")
    key_concepts: list[str] = Field(default_factory=list, description="Ordered concept labels")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
