import queue
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum

from spot_deals.providers.pricing_client import PricingClient
from spot_deals.providers.provider_types import GlobalDeal
from spot_deals.providers.region_catalog import RegionCatalogClient

from .deal_filter import DEFAULT_MIN_SAVINGS_RATE, select_deals
from .errors import NoResultsFound, RegionCatalogUnavailable, SpotDealsError
from .utils import setup_logger

logger = setup_logger(name="core.aggregator")

DEFAULT_TOP_N = 5


class AggregationState(Enum):
    IDLE = "idle"
    FETCHING_CATALOG = "fetching_catalog"
    FANNING_OUT = "fanning_out"
    COLLECTING = "collecting"
    RANKED = "ranked"
    FAILED = "failed"


class GlobalAggregator:
    """
    Finds the cheapest spot offers per vCPU across every catalog region.

    One pricing lookup runs per region in a thread pool. Each lookup puts at
    most one deal (the cheapest of its region) on a shared queue, which is
    drained only after every lookup has finished. A failing region is logged
    and contributes nothing; only a catalog failure or an empty overall
    result fails the aggregation.
    """

    def __init__(
        self,
        catalog: RegionCatalogClient,
        pricing: PricingClient,
        min_savings_rate: int = DEFAULT_MIN_SAVINGS_RATE,
        max_workers: int | None = None,
    ):
        self.catalog = catalog
        self.pricing = pricing
        self.min_savings_rate = min_savings_rate
        self.max_workers = max_workers
        self.state = AggregationState.IDLE
        self._state_lock = threading.Lock()

    def _transition(self, state: AggregationState):
        with self._state_lock:
            logger.debug(f"Aggregation state {self.state.value} -> {state.value}")
            self.state = state

    def _collect_region(self, index: int, region: str, results: queue.Queue):
        """Look up one region and queue its cheapest deal, if any"""
        try:
            records = self.pricing.fetch_pricing(region)
        except SpotDealsError as e:
            logger.warning(f"Error getting spot deals for region {region}: {e}")
            return

        deals = select_deals(records, self.min_savings_rate)
        if not deals:
            logger.debug(f"No qualifying deals in {region}")
            return
        results.put((index, GlobalDeal.from_ranked(deals[0], region)))

    def best_global_deals(self, top_n: int = DEFAULT_TOP_N) -> list[GlobalDeal]:
        """
        Return up to ``top_n`` region-best deals, cheapest per vCPU first.

        Deals with the same price per vCPU are ordered by their region's
        position in the catalog, so the result never depends on which lookup
        finished first.

        Raises:
            ValueError: ``top_n`` is lower than 1.
            RegionCatalogUnavailable: the region catalog could not be fetched.
            NoResultsFound: no region produced a deal.
        """
        if top_n < 1:
            raise ValueError(f"top_n must be at least 1, got {top_n}")

        self._transition(AggregationState.FETCHING_CATALOG)
        try:
            regions = self.catalog.fetch_regions()
        except SpotDealsError as e:
            self._transition(AggregationState.FAILED)
            logger.error(f"Error fetching regions: {e}")
            raise RegionCatalogUnavailable("region catalog unavailable") from e

        results: queue.Queue = queue.Queue()
        self._transition(AggregationState.FANNING_OUT)
        if regions:
            max_workers = self.max_workers or len(regions)
            with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="region") as executor:
                futures = [
                    executor.submit(self._collect_region, index, region, results)
                    for index, region in enumerate(regions)
                ]
                self._transition(AggregationState.COLLECTING)
                wait(futures)
            try:
                for future in futures:
                    # Re-raise anything the region lookups did not handle
                    future.result()
            except Exception:
                self._transition(AggregationState.FAILED)
                raise
        else:
            self._transition(AggregationState.COLLECTING)

        collected = []
        while not results.empty():
            collected.append(results.get_nowait())

        if not collected:
            self._transition(AggregationState.FAILED)
            raise NoResultsFound("no deals found")

        collected.sort(key=lambda item: (item[1].price_per_vcpu, item[0]))
        self._transition(AggregationState.RANKED)
        logger.info(f"Collected deals from {len(collected)} of {len(regions)} regions")
        return [deal for _, deal in collected[:top_n]]
