"""Application tests for recording and refreshing the silver rate."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.errors import ExternalDependencyError
from storefront.pricing.rate import CommodityRate
from storefront.pricing.recording import RecordCommodityRate
from storefront.pricing.refresh import RefreshCommodityRate


class TestRecordCommodityRate:
    def test_manual_rate_becomes_current(self):
        rate_id = current_domain.process(RecordCommodityRate(price_per_gram=158.4), asynchronous=False)

        latest = current_domain.repository_for(CommodityRate).latest()
        assert str(latest.id) == rate_id
        assert latest.price_per_gram == 158.4
        assert latest.source == "manual"

    def test_zero_rate_rejected(self):
        with pytest.raises(ValidationError):
            current_domain.process(RecordCommodityRate(price_per_gram=0), asynchronous=False)

        assert current_domain.repository_for(CommodityRate).history() == []


class TestRefreshCommodityRate:
    def test_records_provider_quote(self, rate_provider):
        rate_provider.configure(rate_per_gram=161.73)

        rate_id = current_domain.process(RefreshCommodityRate(), asynchronous=False)

        rate = current_domain.repository_for(CommodityRate).get(rate_id)
        assert rate.price_per_gram == 161.73
        assert rate.source == "automatic"
        assert rate_provider.calls == 1

    def test_admin_refresh_can_be_manual(self, rate_provider):
        rate_id = current_domain.process(RefreshCommodityRate(source="manual"), asynchronous=False)
        assert current_domain.repository_for(CommodityRate).get(rate_id).source == "manual"

    def test_provider_failure(self, rate_provider):
        rate_provider.configure(should_succeed=False)

        with pytest.raises(ExternalDependencyError) as exc:
            current_domain.process(RefreshCommodityRate(), asynchronous=False)

        assert exc.value.reason == "rate_provider_unavailable"
        assert exc.value.status_code == 503
        assert current_domain.repository_for(CommodityRate).history() == []

    def test_provider_returning_zero_rejected(self, rate_provider):
        rate_provider.configure(rate_per_gram=0.0)

        with pytest.raises(ValidationError):
            current_domain.process(RefreshCommodityRate(), asynchronous=False)
