from typing import Any

from spot_deals.core.errors import MalformedResponse
from spot_deals.core.settings import DEFAULT_REGION_CATALOG_URL
from spot_deals.core.utils import setup_logger
from spot_deals.providers.provider_base import DEFAULT_TIMEOUT, JsonApiClient
from spot_deals.providers.provider_types import Region

logger = setup_logger(name="providers.region_catalog")


class RegionCatalogClient(JsonApiClient):
    """Reads the set of standard regions from the AWS locations catalog"""

    def __init__(
        self,
        url: str = DEFAULT_REGION_CATALOG_URL,
        region_type: str = "AWS Region",
        session: Any = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(session=session, timeout=timeout)
        self.url = url
        self.region_type = region_type

    @property
    def source_name(self) -> str:
        return "region catalog"

    def _parse_descriptor(self, key: str, descriptor: Any) -> Region:
        if not isinstance(descriptor, dict):
            raise MalformedResponse(f"Catalog entry '{key}' is not an object")
        fields = {}
        for field in ("code", "name", "type", "label", "continent"):
            value = descriptor.get(field)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise MalformedResponse(f"Catalog entry '{key}' has a non-string '{field}'")
            fields[field] = value
        return Region(**fields)

    def fetch_catalog(self) -> list[Region]:
        """
        Fetch and parse every descriptor of the catalog, whatever its type.

        Returns:
            list[Region]: descriptors in document order.
        """
        data = self._get_json(self.url)
        if not isinstance(data, dict):
            raise MalformedResponse("Region catalog is not a JSON object")
        return [self._parse_descriptor(key, descriptor) for key, descriptor in data.items()]

    def fetch_regions(self) -> list[str]:
        """
        Fetch the codes of all standard regions, sorted ascending.

        Local zones, wavelength zones and other partitions carry a different
        ``type`` and are left out.
        """
        catalog = self.fetch_catalog()
        codes = sorted(region.code for region in catalog if region.type == self.region_type)
        logger.info(f"Region catalog lists {len(codes)} of {len(catalog)} entries as '{self.region_type}'")
        return codes
