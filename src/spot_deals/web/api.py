"""Query API for spot deals.

Exposes the region list, the ranked deals of one region and the best deals
across all regions. Upstream failures are logged here and answered with
generic messages.
"""

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from spot_deals.core.app import App
from spot_deals.core.errors import (
    MissingParameter,
    NoResultsFound,
    RegionCatalogUnavailable,
    SpotDealsError,
)
from spot_deals.core.settings import Settings
from spot_deals.core.utils import setup_logger

logger = setup_logger(name="web.api")

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


def _app_instance(request: Request) -> App:
    return request.app.state.app_instance


@router.get("/health/live")
def live():
    return {"status": "ok"}


@router.get("/api/regions")
def regions(request: Request):
    """Return the codes of all standard regions, sorted."""
    try:
        codes = _app_instance(request).list_regions()
    except SpotDealsError as e:
        logger.error(f"Error fetching regions: {e}")
        return _error(500, "Failed to fetch regions")
    return codes


@router.get("/api/spot-deals")
def spot_deals(
    request: Request,
    region: str | None = Query(None, description="Region code, e.g. us-east-1."),
):
    """Return the deals of one region, cheapest per vCPU first."""
    try:
        deals = _app_instance(request).get_spot_deals(region)
    except MissingParameter:
        return _error(400, "Region parameter is required")
    except SpotDealsError as e:
        logger.error(f"Error getting spot deals: {e}")
        return _error(500, "Failed to get spot deals")
    return [deal.to_dict() for deal in deals]


@router.get("/api/best-global-deal")
def best_global_deal(
    request: Request,
    topN: int | None = Query(None, ge=1, description="Number of deals to return."),  # noqa: N803
):
    """Return the cheapest region-best deals across every region."""
    try:
        deals = _app_instance(request).best_global_deals(topN)
    except RegionCatalogUnavailable:
        return _error(500, "Failed to fetch regions")
    except NoResultsFound:
        return _error(404, "No deals found")
    return [deal.to_dict() for deal in deals]


def create_app(app_instance: App | None = None) -> FastAPI:
    api = FastAPI(title="Spot Deals")
    api.state.app_instance = app_instance or App()
    api.include_router(router)
    return api


app = create_app()


def main():
    import uvicorn

    settings = Settings()
    api = create_app(App(settings))
    logger.info(f"Server is running on http://{settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(
        api,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
