import pytest
import requests

from spot_deals.core.errors import MalformedResponse, NetworkFailure, UpstreamStatusError
from spot_deals.providers.pricing_client import PricingClient
from spot_deals.providers.provider_types import PriceRecord

URL = "https://pricing.test"


class TestPricingClient:
    def _client(self, session, **kwargs):
        return PricingClient(base_url=URL, session=session, **kwargs)

    def test_fetch_pricing_parses_offers(self, session_factory, entry_factory):
        session = session_factory(pricing={"us-east-1": {"Prices": [
            entry_factory("m5.large", 8, "60%", "0.80", memory="32 GiB"),
            entry_factory("c5.xlarge", 4, "45%", "0.17"),
        ]}})

        records = self._client(session).fetch_pricing("us-east-1")

        assert records == [
            PriceRecord("m5.large", 8, "32 GiB", "60%", "0.80"),
            PriceRecord("c5.xlarge", 4, "16 GiB", "45%", "0.17"),
        ]

    def test_request_is_scoped_to_region_and_filtered(self, session_factory):
        session = session_factory()

        self._client(session, timeout=2.0).fetch_pricing("eu-west-1")

        call = session.calls[0]
        assert call["url"] == URL
        assert call["params"] == {"region": "eu-west-1", "filter": "ebs,cpu>=4,cpu<=32"}
        assert call["headers"] == {"accept": "json"}
        assert call["timeout"] == 2.0

    def test_custom_filter(self, session_factory):
        session = session_factory()

        self._client(session, instance_filter="cpu>=2,cpu<=8").fetch_pricing("eu-west-1")

        assert session.calls[0]["params"]["filter"] == "cpu>=2,cpu<=8"

    def test_zero_offers_is_not_an_error(self, session_factory):
        session = session_factory(pricing={"us-east-1": {"Prices": []}})

        assert self._client(session).fetch_pricing("us-east-1") == []

    @pytest.mark.parametrize("payload", [{}, {"Prices": None}])
    def test_missing_prices_means_no_offers(self, session_factory, payload):
        session = session_factory(pricing={"us-east-1": payload})

        assert self._client(session).fetch_pricing("us-east-1") == []

    def test_missing_fields_default(self, session_factory):
        session = session_factory(pricing={"us-east-1": {"Prices": [{"InstanceType": "t3.large"}]}})

        records = self._client(session).fetch_pricing("us-east-1")

        assert records == [PriceRecord("t3.large", 0, "", "", "")]

    def test_network_failure(self, session_factory):
        session = session_factory(pricing={"us-east-1": requests.ConnectionError("reset")})

        with pytest.raises(NetworkFailure):
            self._client(session).fetch_pricing("us-east-1")

    def test_non_2xx_status(self, session_factory, response_factory):
        session = session_factory(pricing={"us-east-1": response_factory({}, status_code=429, url=URL)})

        with pytest.raises(UpstreamStatusError) as exc_info:
            self._client(session).fetch_pricing("us-east-1")

        assert exc_info.value.status_code == 429

    def test_body_not_json(self, session_factory, response_factory):
        session = session_factory(pricing={"us-east-1": response_factory(body="not json", url=URL)})

        with pytest.raises(MalformedResponse):
            self._client(session).fetch_pricing("us-east-1")

    @pytest.mark.parametrize("payload", [
        [],
        {"Prices": "none"},
        {"Prices": ["m5.large"]},
        {"Prices": [{"InstanceType": "m5.large", "VCPUS": "8"}]},
        {"Prices": [{"InstanceType": "m5.large", "VCPUS": 2.5}]},
        {"Prices": [{"InstanceType": "m5.large", "VCPUS": True}]},
        {"Prices": [{"InstanceType": "m5.large", "VCPUS": 8, "SpotPrice": 0.8}]},
    ])
    def test_wrong_shape_is_malformed(self, session_factory, payload):
        session = session_factory(pricing={"us-east-1": payload})

        with pytest.raises(MalformedResponse):
            self._client(session).fetch_pricing("us-east-1")
