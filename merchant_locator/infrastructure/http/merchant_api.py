from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from ...entities import MerchantLocatorError, TransportError, UpstreamError, UpstreamResult, UpstreamSuccess, ValidationError
from ...services.merchant_search import MerchantSearchService
from ...utils.logging_utils import get_logger

logger = get_logger()

UPSTREAM_FAILED_MESSAGE = "Mastercard Places API request failed."
UPSTREAM_UNREACHABLE_MESSAGE = "Mastercard Places API could not be reached."


@dataclass
class MerchantApiServices:
    merchant_search_service: MerchantSearchService


def result_to_response(result: UpstreamResult) -> JSONResponse:
    if isinstance(result, UpstreamSuccess):
        return JSONResponse({
            "request": {
                "merchantSearchUrl": result.request_url,
            },
            "data": result.body,
        })

    if isinstance(result, UpstreamError):
        return JSONResponse({
            "error": UPSTREAM_FAILED_MESSAGE,
            "status": result.status_code,
            "statusText": result.status_text,
            "upstream": result.body,
        }, status_code=result.status_code)

    if isinstance(result, TransportError):
        return JSONResponse({
            "error": UPSTREAM_UNREACHABLE_MESSAGE,
            "message": result.message,
        }, status_code=504 if result.timed_out else 502)

    raise TypeError(f"unknown upstream result: {type(result).__name__}")


def error_to_response(error: MerchantLocatorError) -> JSONResponse:
    if isinstance(error, ValidationError):
        return JSONResponse({"error": error.reason}, status_code=error.status_code)

    return JSONResponse({
        "error": "Server error.",
        "message": error.reason,
    }, status_code=error.status_code)


def create_merchant_api(services: MerchantApiServices) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.services = services
        yield
        services.merchant_search_service.client.close()

    app = FastAPI(
        title="Merchant locator API",
        lifespan=lifespan,
    )

    def get_services(request: Request) -> MerchantApiServices:
        return request.app.state.services

    @app.get("/api/health")
    def health():
        return {"ok": True}

    # sync on purpose: FastAPI runs it in its threadpool, keeping key decoding and signing off the event loop
    @app.get("/api/merchants")
    def search_merchants(
        lat: Optional[str] = Query(None),
        lng: Optional[str] = Query(None),
        radius_km: Optional[str] = Query(None, alias="radiusKm"),
        limit: Optional[str] = Query(None),
        name: Optional[str] = Query(None),
        svc: MerchantApiServices = Depends(get_services),
    ):
        try:
            result = svc.merchant_search_service.search_query(lat, lng, radius_km, limit, name)
        except MerchantLocatorError as error:
            if not isinstance(error, ValidationError):
                logger.error("merchant search failed: %s", error)
            return error_to_response(error)

        return result_to_response(result)

    return app
