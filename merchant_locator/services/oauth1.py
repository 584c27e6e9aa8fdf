"""
OAuth 1.0a request signing (RFC 5849) with RSA-SHA256 and the body hash extension.

The signature base string is::

    METHOD & encode(scheme://host[:port]/path) & encode(sorted parameters)

where the parameters are the decoded query parameters of the target URL
plus every ``oauth_*`` parameter but the signature, each name and value
percent-encoded, then sorted by name and value.
"""

import base64
import hashlib
import re
import secrets
import time
from typing import Callable, Mapping, Optional
from urllib.parse import unquote

import cryptography.exceptions
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..entities import AuthorizationHeader, SigningError, SigningErrorType, SigningRequest
from ..utils.logging_utils import get_logger
from ..utils.url import normalize_base_url, percent_encode, query_parameters

logger = get_logger()

SIGNATURE_METHOD = "RSA-SHA256"
OAUTH_VERSION = "1.0"
NONCE_BYTES = 16

HEADER_PARAMETER = re.compile(r'([A-Za-z0-9_]+)="([^"]*)"')


def body_hash(body: bytes) -> str:
    return base64.b64encode(hashlib.sha256(body or b"").digest()).decode()


def make_nonce() -> str:
    return secrets.token_urlsafe(NONCE_BYTES)


def normalized_parameters(url: str, oauth_parameters: Mapping[str, str]) -> str:
    pairs = [
        (percent_encode(name), percent_encode(value))
        for name, value in query_parameters(url)
    ]
    pairs.extend(
        (percent_encode(name), percent_encode(value))
        for name, value in oauth_parameters.items()
        if name != "oauth_signature"
    )
    pairs.sort()

    return "&".join(f"{name}={value}" for name, value in pairs)


def signature_base_string(method: str, url: str, oauth_parameters: Mapping[str, str]) -> str:
    return "&".join((
        percent_encode(method.upper()),
        percent_encode(normalize_base_url(url)),
        percent_encode(normalized_parameters(url, oauth_parameters)),
    ))


class OAuth1Signer:
    """
    Produces the ``Authorization`` header of one outbound call.

    Nonce and clock are injectable so a signature can be reproduced; with
    both fixed, signing is deterministic since PKCS#1 v1.5 has no random
    padding.
    """

    def __init__(
        self,
        nonce_factory: Callable[[], str] = make_nonce,
        clock: Callable[[], float] = time.time,
    ):
        self.nonce_factory = nonce_factory
        self.clock = clock

    def sign(self, request: SigningRequest, *, nonce: Optional[str] = None, timestamp: Optional[str] = None) -> AuthorizationHeader:
        parameters = {
            "oauth_consumer_key": request.consumer_key,
            "oauth_nonce": nonce if nonce is not None else self.nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": timestamp if timestamp is not None else str(int(self.clock())),
            "oauth_version": OAUTH_VERSION,
            "oauth_body_hash": body_hash(request.body),
        }

        base_string = signature_base_string(request.method, request.url, parameters)

        try:
            private_key = request.key_material.private_key()
        except (ValueError, TypeError, cryptography.exceptions.UnsupportedAlgorithm):
            raise SigningError(SigningErrorType.INVALID_KEY) from None

        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise SigningError(SigningErrorType.INVALID_KEY, f"{SIGNATURE_METHOD} needs an RSA key, got {type(private_key).__name__}.")

        try:
            signature = private_key.sign(base_string.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
        except ValueError:
            raise SigningError(SigningErrorType.INVALID_KEY) from None

        parameters["oauth_signature"] = base64.b64encode(signature).decode()
        logger.debug("signed %s %s", request.method.upper(), normalize_base_url(request.url))
        return AuthorizationHeader(parameters)


def parse_authorization_header(value: str) -> dict:
    """Parameters of an ``OAuth k="v",...`` header value, percent-decoded."""
    value = value.strip()
    if not value.startswith("OAuth "):
        raise ValueError("not an OAuth authorization header")

    return {
        name: unquote(raw)
        for name, raw in HEADER_PARAMETER.findall(value[len("OAuth "):])
    }


def verify_authorization_header(
    value: str,
    method: str,
    url: str,
    body: bytes,
    public_key: rsa.RSAPublicKey,
) -> bool:
    """Check that ``value`` is a valid RSA-SHA256 signature of this exact request."""
    try:
        parameters = parse_authorization_header(value)
        signature = base64.b64decode(parameters["oauth_signature"], validate=True)
    except (ValueError, KeyError):
        return False

    if parameters.get("oauth_signature_method") != SIGNATURE_METHOD:
        return False

    if parameters.get("oauth_body_hash") != body_hash(body):
        return False

    base_string = signature_base_string(method, url, parameters)
    try:
        public_key.verify(signature, base_string.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
        return True
    except cryptography.exceptions.InvalidSignature:
        return False
