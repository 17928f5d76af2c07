from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PremiumStatus(BaseModel):
    is_premium: bool = False
    is_ad_removal_purchased: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @property
    def ads_disabled(self) -> bool:
        return self.is_premium or self.is_ad_removal_purchased
