class SpotDealsError(Exception):
    """Base class for every error raised by the deal pipeline"""


class NetworkFailure(SpotDealsError):
    """The upstream service could not be reached (connection error, timeout)"""


class UpstreamStatusError(SpotDealsError):
    """The upstream service answered with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the upstream service.
        url: The requested URL.
    """

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class MalformedResponse(SpotDealsError):
    """The upstream body is not JSON or does not have the expected shape"""


class MissingParameter(SpotDealsError):
    """A required query input is absent"""


class NoResultsFound(SpotDealsError):
    """The pipeline completed but produced no deals"""


class RegionCatalogUnavailable(SpotDealsError):
    """The region catalog could not be fetched, so no fan-out happened"""
