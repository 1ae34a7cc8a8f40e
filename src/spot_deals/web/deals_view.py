from spot_deals.core.app import App
from spot_deals.providers.provider_types import GlobalDeal, RankedDeal


class DealsView:
    """Turns App results into table rows for the dashboard"""

    def __init__(self, app_instance: App):
        self.app_instance: App = app_instance

    def get_available_regions(self) -> list[str]:
        return self.app_instance.list_regions()

    def region_rows(self, region: str) -> list[dict]:
        """Ranked deals of one region as display rows"""
        return region_deal_rows(self.app_instance.get_spot_deals(region))

    def global_rows(self, top_n: int) -> list[dict]:
        """Best global deals as display rows"""
        return global_deal_rows(self.app_instance.best_global_deals(top_n))


def region_deal_rows(deals: list[RankedDeal]) -> list[dict]:
    return [
        {
            "Instance type": deal.record.instance_type,
            "vCPUs": deal.record.vcpus,
            "Memory": deal.record.memory,
            "Savings": f"{deal.savings_rate}%",
            "Spot price ($/h)": float(deal.price),
            "Price per vCPU ($/h)": round(float(deal.price_per_unit), 6),
        }
        for deal in deals
    ]


def global_deal_rows(deals: list[GlobalDeal]) -> list[dict]:
    return [
        {
            "Rank": rank,
            "Region": deal.region,
            "Instance type": deal.instance_type,
            "vCPUs": deal.vcpus,
            "Memory": deal.memory,
            "Spot price ($/h)": float(deal.price),
            "Price per vCPU ($/h)": round(float(deal.price_per_vcpu), 6),
        }
        for rank, deal in enumerate(deals, start=1)
    ]
