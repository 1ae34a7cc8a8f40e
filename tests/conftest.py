import json
import threading

import pytest
import requests

from spot_deals.core.app import App
from spot_deals.core.settings import Settings

CATALOG_URL = "https://catalog.test/locations.json"
PRICING_URL = "https://pricing.test"


def make_response(payload=None, status_code=200, body=None, url="https://upstream.test/") -> requests.Response:
    """Build a real requests.Response carrying ``payload`` as JSON (or raw ``body``)."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    if body is None:
        body = json.dumps(payload)
    response._content = body.encode("utf-8")
    return response


def region_descriptor(code, type="AWS Region", name=None):
    return {
        "name": name or code,
        "code": code,
        "type": type,
        "label": code.upper(),
        "continent": "North America",
    }


def price_entry(instance_type, vcpus, saving_rate, price, memory="16 GiB"):
    return {
        "InstanceType": instance_type,
        "VCPUS": vcpus,
        "Memory": memory,
        "SpotSavingRate": saving_rate,
        "SpotPrice": price,
    }


class FakeSession:
    """
    Stand-in for the requests module. Catalog requests return ``catalog``;
    pricing requests are answered from ``pricing`` keyed by region. A value
    that is an exception is raised, a Response is returned as-is, anything
    else is served as a JSON body.
    """

    def __init__(self, catalog=None, pricing=None):
        self.catalog = catalog if catalog is not None else {}
        self.pricing = pricing or {}
        self.calls = []
        self._lock = threading.Lock()

    def _answer(self, value, url):
        if isinstance(value, Exception):
            raise value
        if isinstance(value, requests.Response):
            return value
        return make_response(value, url=url)

    def get(self, url, params=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if url == CATALOG_URL:
            return self._answer(self.catalog, url)
        region = (params or {}).get("region")
        if region not in self.pricing:
            return make_response({"Prices": []}, url=url)
        return self._answer(self.pricing[region], url)


@pytest.fixture
def settings():
    return Settings(REGION_CATALOG_URL=CATALOG_URL, PRICING_URL=PRICING_URL, LOG_LEVEL="DEBUG")


@pytest.fixture
def session():
    return FakeSession(
        catalog={
            "us-east-1": region_descriptor("us-east-1"),
            "us-west-2": region_descriptor("us-west-2"),
            "us-east-1-bos-1": region_descriptor("us-east-1-bos-1", type="AWS Local Zone"),
        },
        pricing={
            "us-east-1": {"Prices": [price_entry("m5.large", 8, "60%", "0.80")]},
            "us-west-2": {"Prices": [price_entry("c5.xlarge", 4, "70%", "0.30")]},
        },
    )


@pytest.fixture
def app_instance(settings, session):
    return App(settings, session=session)


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def descriptor_factory():
    return region_descriptor


@pytest.fixture
def entry_factory():
    return price_entry


@pytest.fixture
def session_factory():
    return FakeSession
