import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WeightRecord(BaseModel):
    """Represents a single weigh-in. One record per calendar day."""

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4, description="The unique ID of the record."
    )
    date: datetime = Field(description="When the weight was recorded.")
    weight: float = Field(gt=0, description="The weight in kilograms.")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
