from abc import ABC, abstractmethod
from typing import Any

import requests

from spot_deals.core.errors import MalformedResponse, NetworkFailure, UpstreamStatusError
from spot_deals.core.utils import setup_logger

logger = setup_logger(name="providers.provider_base")

DEFAULT_TIMEOUT = 10.0


class JsonApiClient(ABC):
    """Base class for clients of upstream JSON documents.

    Requests go through ``session``, which defaults to the ``requests`` module
    itself; any object exposing a compatible ``get`` can be injected.
    Transport, status and decoding problems are translated into the domain
    error kinds, so callers never see requests' own exceptions.
    """

    def __init__(self, session: Any = None, timeout: float = DEFAULT_TIMEOUT):
        self.session = session if session is not None else requests
        self.timeout = timeout

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Human readable name of the upstream, used in errors and logs"""
        pass

    def get_headers(self) -> dict[str, str]:
        return {}

    def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """
        GET ``url`` and decode the body as JSON.

        Raises:
            NetworkFailure: the request did not complete.
            UpstreamStatusError: the upstream answered with a non-2xx status.
            MalformedResponse: the body is not valid JSON.
        """
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(
                url, params=params, headers=self.get_headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            raise NetworkFailure(f"{self.source_name} request failed: {e}") from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise UpstreamStatusError(
                f"{self.source_name} returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"{self.source_name} returned a body that is not JSON") from e
