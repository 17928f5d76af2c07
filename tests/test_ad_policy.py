"""Tests for ad gating."""

from datetime import timedelta

from models.premium_status import PremiumStatus
from services.ad_policy import AdPolicy
from services.record_store import InMemoryRecordStore
from tests.conftest import at

NOW = at(2024, 3, 14, 12)


class TestAdPolicy:
    def test_free_user_sees_banner(self, store):
        assert AdPolicy(store).should_show_banner()

    def test_interstitial_interval(self, store):
        policy = AdPolicy(store)

        assert policy.should_show_interstitial(NOW)
        policy.record_interstitial_shown(NOW)
        assert not policy.should_show_interstitial(NOW + timedelta(seconds=59))
        assert policy.should_show_interstitial(NOW + timedelta(seconds=60))

    def test_ad_removal_is_persisted(self, store):
        AdPolicy(store).grant_ad_removal()

        policy = AdPolicy(store)
        assert not policy.should_show_banner()
        assert not policy.should_show_interstitial(NOW)

    def test_premium_disables_ads(self):
        store = InMemoryRecordStore()
        store.save_premium_status(PremiumStatus(is_premium=True))

        assert not AdPolicy(store).should_show_banner()

    def test_set_premium(self, store):
        policy = AdPolicy(store)

        policy.set_premium(True)

        assert store.load_premium_status().is_premium
