from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

import config


class NotificationSettings(BaseModel):
    """Reminder preferences. Only the success toggle affects the engines."""

    fasting_success_notification: bool = False
    fasting_emoji: str = config.DEFAULT_FASTING_EMOJI
    weight_emoji: str = config.DEFAULT_WEIGHT_EMOJI
    weight_record_day_of_week: int = Field(
        default=config.DEFAULT_WEIGHT_RECORD_DAY_OF_WEEK,
        ge=1,
        le=7,
        description="Day of the weekly weigh-in reminder (1=Sunday, 2=Monday, ...).",
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
