from pydantic import Field

from ._base import BaseConfig as _BaseConfig

DEFAULT_MERCHANT_SEARCH_URL = "https://api.mastercard.com/places/v1/merchant"


class UpstreamConfig(_BaseConfig):
    merchant_search_url: str = Field(DEFAULT_MERCHANT_SEARCH_URL, description="Base endpoint of the merchant search API")
    timeout: float = Field(5.0, gt=0, description="Seconds to wait for the upstream API before giving up")


class ServerConfig(_BaseConfig):
    host: str = Field("127.0.0.1", description="HTTP bind address")
    port: int = Field(3000, description="HTTP bind port")
