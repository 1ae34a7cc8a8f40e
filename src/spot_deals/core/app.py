from typing import Any

from spot_deals.providers.pricing_client import PricingClient
from spot_deals.providers.provider_types import GlobalDeal, RankedDeal, Region
from spot_deals.providers.region_catalog import RegionCatalogClient

from .aggregator import GlobalAggregator
from .deal_filter import select_deals
from .errors import MissingParameter
from .settings import Settings
from .utils import set_log_level, setup_logger

logger = setup_logger(name="core.app")


class App:
    """
    Application layer that wires settings, upstream clients, the deal filter
    and the global aggregator. Every outer surface (API, dashboard) goes
    through this class.
    """

    def __init__(self, settings: Settings | None = None, session: Any = None):
        self.settings = settings or Settings()
        set_log_level(self.settings.get_log_level())
        self.catalog = RegionCatalogClient(
            url=self.settings.REGION_CATALOG_URL,
            region_type=self.settings.STANDARD_REGION_TYPE,
            session=session,
            timeout=self.settings.REQUEST_TIMEOUT,
        )
        self.pricing = PricingClient(
            base_url=self.settings.PRICING_URL,
            instance_filter=self.settings.pricing_filter(),
            session=session,
            timeout=self.settings.REQUEST_TIMEOUT,
        )

    # ----------------- Region Methods ----------------- #

    def list_regions(self) -> list[str]:
        """
        Codes of all standard regions, sorted ascending.
        :raises SpotDealsError: If the catalog cannot be fetched or parsed.
        """
        return self.catalog.fetch_regions()

    def list_catalog(self) -> list[Region]:
        """Every catalog descriptor, including non-standard zones"""
        return self.catalog.fetch_catalog()

    # ----------------- Deal Methods ----------------- #

    def get_spot_deals(self, region: str | None) -> list[RankedDeal]:
        """
        Ranked deals of a single region, cheapest per vCPU first.
        :param region: Region code, e.g. "us-east-1".
        :raises MissingParameter: If no region is given.
        :raises SpotDealsError: If the pricing lookup fails.
        """
        if not region:
            raise MissingParameter("Region parameter is required")
        records = self.pricing.fetch_pricing(region)
        deals = select_deals(records, self.settings.MIN_SAVINGS_RATE)
        logger.info(f"{len(deals)} of {len(records)} offers in {region} qualify as deals")
        return deals

    def best_global_deals(self, top_n: int | None = None) -> list[GlobalDeal]:
        """
        Cheapest region-best deals across all regions.
        :param top_n: Number of deals to return (default: settings TOP_N).
        :raises RegionCatalogUnavailable: If the region catalog cannot be fetched.
        :raises NoResultsFound: If no region produced a deal.
        """
        aggregator = GlobalAggregator(
            catalog=self.catalog,
            pricing=self.pricing,
            min_savings_rate=self.settings.MIN_SAVINGS_RATE,
            max_workers=self.settings.MAX_WORKERS,
        )
        return aggregator.best_global_deals(top_n if top_n is not None else self.settings.TOP_N)
