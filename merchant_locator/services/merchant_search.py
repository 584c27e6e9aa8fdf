from typing import Optional

from ..configuration import AppConfig, CredentialsConfig, UpstreamConfig
from ..entities import AuthorizationHeader, ConfigurationError, ConfigurationErrorType, SearchParams, SigningRequest, UpstreamResult
from ..infrastructure.places import PlacesClient
from ..utils.logging_utils import get_logger
from ..utils.url import set_query_parameters
from .credential_resolver import CredentialResolver
from .key_material import KeyMaterialCache
from .oauth1 import OAuth1Signer

logger = get_logger()


class MerchantSearchService:
    """
    Signed geo search against the merchant API.

    Every call resolves the signing key again (through the cache when one is
    configured), signs a GET with an empty body and sends it once. Local
    failures raise; whatever the upstream answers is returned as a result.
    """

    def __init__(
        self,
        credentials: CredentialsConfig,
        upstream: UpstreamConfig,
        client: Optional[PlacesClient] = None,
        signer: Optional[OAuth1Signer] = None,
        resolver: Optional[CredentialResolver] = None,
    ):
        self.credentials = credentials
        self.upstream = upstream
        self.client = client or PlacesClient(timeout=upstream.timeout)
        self.signer = signer or OAuth1Signer()

        if resolver is None:
            cache = KeyMaterialCache(credentials.cache_ttl) if credentials.cache_ttl > 0 else None
            resolver = CredentialResolver(credentials.sources(), cache=cache)
        self.resolver = resolver

    @staticmethod
    def from_config(configuration: AppConfig) -> "MerchantSearchService":
        return MerchantSearchService(configuration.credentials, configuration.upstream)

    def build_url(self, params: SearchParams) -> str:
        return set_query_parameters(self.upstream.merchant_search_url, params.to_query_parameters())

    def consumer_key(self) -> str:
        consumer_key = self.credentials.consumer_key
        if consumer_key is None or not consumer_key.get_secret_value().strip():
            raise ConfigurationError(ConfigurationErrorType.MISSING_CONSUMER_KEY)

        return consumer_key.get_secret_value().strip()

    def sign(self, method: str, url: str, body: bytes = b"") -> AuthorizationHeader:
        """
        Raises:
            ConfigurationError: the consumer key or the signing key is missing or unusable.
            SigningError: the key cannot produce RSA-SHA256 signatures.
        """
        consumer_key = self.consumer_key()
        key_material = self.resolver.resolve()

        return self.signer.sign(SigningRequest(method, url, body, consumer_key, key_material))

    def search(self, params: SearchParams) -> UpstreamResult:
        url = self.build_url(params)
        authorization = self.sign("GET", url)

        logger.info("searching merchants around (%s, %s) within %skm", params.latitude, params.longitude, params.radius_km)
        return self.client.get(url, authorization.value)

    def search_query(self, lat=None, lng=None, radius_km=None, limit=None, name=None) -> UpstreamResult:
        """Validate raw query values, then search. No credential is touched when validation fails."""
        params = SearchParams.from_query(lat, lng, radius_km, limit, name)
        return self.search(params)
