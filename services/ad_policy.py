# services/ad_policy.py
import logging
from datetime import datetime, timedelta
from typing import Optional

import config
from models.premium_status import PremiumStatus
from services.record_store import RecordStore


class AdPolicy:
    """Decides when ads may be shown. Premium users and ad-removal buyers see none."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.status: PremiumStatus = store.load_premium_status()
        self.last_interstitial_at: Optional[datetime] = None

    def should_show_banner(self) -> bool:
        return not self.status.ads_disabled

    def should_show_interstitial(self, now: datetime) -> bool:
        if self.status.ads_disabled:
            return False
        if self.last_interstitial_at is None:
            return True
        interval = timedelta(seconds=config.INTERSTITIAL_AD_INTERVAL_SECONDS)
        return now - self.last_interstitial_at >= interval

    def record_interstitial_shown(self, now: datetime):
        self.last_interstitial_at = now

    def grant_ad_removal(self):
        """Marks the ad-removal purchase as completed and persists it."""
        self.status = self.status.model_copy(update={"is_ad_removal_purchased": True})
        self.store.save_premium_status(self.status)
        logging.info(f"Ad removal ({config.AD_REMOVAL_PRODUCT_ID}) unlocked.")

    def set_premium(self, is_premium: bool):
        self.status = self.status.model_copy(update={"is_premium": is_premium})
        self.store.save_premium_status(self.status)
