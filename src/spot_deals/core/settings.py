from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationInfo, field_validator
from urllib.parse import urlparse
import logging

DEFAULT_REGION_CATALOG_URL = "https://b0.p.awsstatic.com/locations/1.0/aws/current/locations.json"
DEFAULT_PRICING_URL = "https://ec2.shop"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    REGION_CATALOG_URL: str = Field(
        default=DEFAULT_REGION_CATALOG_URL,
        description="URL of the region catalog document"
    )
    PRICING_URL: str = Field(
        default=DEFAULT_PRICING_URL,
        description="Base URL of the spot pricing provider"
    )
    STANDARD_REGION_TYPE: str = Field(
        default="AWS Region",
        description="Catalog 'type' value that marks a standard region"
    )
    MIN_VCPUS: int = Field(default=4, ge=1, description="Smallest vCPU count requested from the provider")
    MAX_VCPUS: int = Field(default=32, ge=1, description="Largest vCPU count requested from the provider")
    REQUIRE_EBS: bool = Field(default=True, description="Only request instances with attached block storage")
    MIN_SAVINGS_RATE: int = Field(
        default=50,
        description="Savings rate (percent) an offer must strictly exceed to count as a deal"
    )
    TOP_N: int = Field(default=5, ge=1, description="Number of global deals returned by default")
    REQUEST_TIMEOUT: float = Field(default=10.0, gt=0, description="Per-request HTTP timeout in seconds")
    MAX_WORKERS: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cap on concurrent region lookups (default: one worker per region)"
    )
    API_HOST: str = Field(default="0.0.0.0", description="Bind address of the query API")
    API_PORT: int = Field(default=8080, description="Port of the query API")

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {', '.join(valid_levels)}")
        return v

    def get_log_level(self) -> int:
        """Convert string log level to logging constant"""
        return getattr(logging, self.LOG_LEVEL)

    @field_validator('REGION_CATALOG_URL', 'PRICING_URL')
    @classmethod
    def validate_url(cls, v):
        result = urlparse(v)
        if not all([result.scheme, result.netloc]):
            raise ValueError(f"Invalid URL format: {v}")
        return v

    @field_validator('MAX_VCPUS')
    @classmethod
    def validate_vcpu_range(cls, v, info: ValidationInfo):
        min_vcpus = info.data.get('MIN_VCPUS')
        if min_vcpus is not None and v < min_vcpus:
            raise ValueError(f"MAX_VCPUS ({v}) must not be lower than MIN_VCPUS ({min_vcpus})")
        return v

    def pricing_filter(self) -> str:
        """Server-side filter expression sent to the pricing provider"""
        terms = ["ebs"] if self.REQUIRE_EBS else []
        terms.append(f"cpu>={self.MIN_VCPUS}")
        terms.append(f"cpu<={self.MAX_VCPUS}")
        return ",".join(terms)
