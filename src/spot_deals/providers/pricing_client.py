from typing import Any

from spot_deals.core.errors import MalformedResponse
from spot_deals.core.settings import DEFAULT_PRICING_URL
from spot_deals.core.utils import setup_logger
from spot_deals.providers.provider_base import DEFAULT_TIMEOUT, JsonApiClient
from spot_deals.providers.provider_types import PriceRecord

logger = setup_logger(name="providers.pricing_client")

DEFAULT_FILTER = "ebs,cpu>=4,cpu<=32"


class PricingClient(JsonApiClient):
    """Client for the ec2.shop per-region spot pricing lookup"""

    def __init__(
        self,
        base_url: str = DEFAULT_PRICING_URL,
        instance_filter: str = DEFAULT_FILTER,
        session: Any = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(session=session, timeout=timeout)
        self.base_url = base_url
        self.instance_filter = instance_filter

    @property
    def source_name(self) -> str:
        return "pricing provider"

    def get_headers(self) -> dict[str, str]:
        return {"accept": "json"}

    @staticmethod
    def _string_field(entry: dict, field: str) -> str:
        value = entry.get(field)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise MalformedResponse(f"Price entry field '{field}' is not a string")
        return value

    def _parse_entry(self, entry: Any) -> PriceRecord:
        if not isinstance(entry, dict):
            raise MalformedResponse("Price entry is not an object")
        vcpus = entry.get("VCPUS")
        if vcpus is None:
            vcpus = 0
        # bool is an int subclass but never a valid vCPU count
        if isinstance(vcpus, bool) or not isinstance(vcpus, int):
            raise MalformedResponse("Price entry field 'VCPUS' is not an integer")
        return PriceRecord(
            instance_type=self._string_field(entry, "InstanceType"),
            vcpus=vcpus,
            memory=self._string_field(entry, "Memory"),
            spot_saving_rate=self._string_field(entry, "SpotSavingRate"),
            spot_price=self._string_field(entry, "SpotPrice"),
        )

    def fetch_pricing(self, region: str) -> list[PriceRecord]:
        """
        Fetch the spot offers of one region.

        The provider applies the instance filter server-side; an empty
        ``Prices`` list is a valid answer and yields no records.

        Args:
            region: Region code, e.g. "us-east-1".

        Returns:
            list[PriceRecord]: offers in provider order.
        """
        data = self._get_json(
            self.base_url, params={"region": region, "filter": self.instance_filter}
        )
        if not isinstance(data, dict):
            raise MalformedResponse(f"Pricing document for {region} is not a JSON object")
        prices = data.get("Prices")
        if prices is None:
            prices = []
        if not isinstance(prices, list):
            raise MalformedResponse(f"'Prices' for {region} is not a list")

        records = [self._parse_entry(entry) for entry in prices]
        logger.debug(f"Fetched {len(records)} offers for {region}")
        return records
