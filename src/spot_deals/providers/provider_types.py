from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Region:
    code: str
    name: str
    type: str
    label: str
    continent: str


@dataclass(frozen=True)
class PriceRecord:
    instance_type: str
    vcpus: int
    memory: str  # display string, e.g. "16 GiB"
    spot_saving_rate: str  # percentage string, e.g. "60%"
    spot_price: str  # decimal in a string, currency per hour

    def to_dict(self) -> dict:
        """Render the record with the provider's field names"""
        return {
            "InstanceType": self.instance_type,
            "VCPUS": self.vcpus,
            "Memory": self.memory,
            "SpotSavingRate": self.spot_saving_rate,
            "SpotPrice": self.spot_price,
        }


@dataclass(frozen=True)
class RankedDeal:
    record: PriceRecord
    savings_rate: int
    price: Decimal
    price_per_unit: Decimal

    def to_dict(self) -> dict:
        return self.record.to_dict()


@dataclass(frozen=True)
class GlobalDeal:
    instance_type: str
    vcpus: int
    memory: str
    price: Decimal
    price_per_vcpu: Decimal
    region: str

    @classmethod
    def from_ranked(cls, deal: RankedDeal, region: str) -> "GlobalDeal":
        return cls(
            instance_type=deal.record.instance_type,
            vcpus=deal.record.vcpus,
            memory=deal.record.memory,
            price=deal.price,
            price_per_vcpu=deal.price_per_unit,
            region=region,
        )

    def to_dict(self) -> dict:
        return {
            "instanceType": self.instance_type,
            "cpus": self.vcpus,
            "memory": self.memory,
            "price": float(self.price),
            "pricePerVCPU": float(self.price_per_vcpu),
            "region": self.region,
        }
