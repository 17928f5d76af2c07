from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

import config


class FastingConfiguration(BaseModel):
    """User preferences for the fasting window."""

    duration_hours: float = Field(
        default=config.DEFAULT_FASTING_DURATION_HOURS,
        ge=config.MIN_FASTING_DURATION_HOURS,
        le=config.MAX_FASTING_DURATION_HOURS,
        description="Length of a fast in hours.",
    )
    start_hour_of_day: int = Field(default=config.DEFAULT_START_HOUR_OF_DAY, ge=0, le=23)
    end_hour_of_day: int = Field(default=config.DEFAULT_END_HOUR_OF_DAY, ge=0, le=23)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )
