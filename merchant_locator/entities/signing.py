from dataclasses import dataclass, field

from ..utils.url import percent_encode
from .key_material import KeyMaterial

OAUTH_HEADER_PARAMETERS = (
    "oauth_consumer_key",
    "oauth_nonce",
    "oauth_signature_method",
    "oauth_timestamp",
    "oauth_version",
    "oauth_body_hash",
    "oauth_signature",
)


@dataclass(frozen=True)
class SigningRequest:
    method: str
    url: str
    body: bytes
    consumer_key: str = field(repr=False)
    key_material: KeyMaterial


@dataclass(frozen=True)
class AuthorizationHeader:
    """OAuth 1.0a parameters of one signed call, in header order."""

    parameters: dict

    def __getitem__(self, name: str) -> str:
        return self.parameters[name]

    @property
    def signature(self) -> str:
        return self.parameters["oauth_signature"]

    @property
    def value(self) -> str:
        pairs = (f'{name}="{percent_encode(self.parameters[name])}"' for name in OAUTH_HEADER_PARAMETERS if name in self.parameters)
        return "OAuth " + ",".join(pairs)

    def __str__(self):
        return self.value
