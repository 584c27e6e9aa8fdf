"""
Private key decoding for every container the signing key is delivered in.

Input bytes that start with PEM armor are read as a PEM private key,
anything else as a binary PKCS#12 container. Whatever the input, the
result is a :class:`KeyMaterial` holding unencrypted PKCS#8 PEM.
"""

import re
from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from ...entities import DecodeError, DecodeErrorType, KeyMaterial
from ...utils.logging_utils import get_logger
from . import _pkcs12

logger = get_logger()

PEM_MARKER = b"-----BEGIN"
PEM_BLOCK = re.compile(rb"-----BEGIN ([A-Z0-9 ]+)-----.*?-----END \1-----", re.DOTALL)

# bag kinds in the order they are searched, first match wins
KEY_BAG_PRECEDENCE = (_pkcs12.SHROUDED_KEY_BAG, _pkcs12.KEY_BAG)


def is_pem(data: bytes) -> bool:
    return data.strip().startswith(PEM_MARKER)


def decode(data: bytes, password: Optional[str] = None) -> KeyMaterial:
    """
    Decode a PEM private key or a PKCS#12 container into normalized PEM.

    Args:
        data: raw PEM text or PKCS#12 DER bytes.
        password: PKCS#12 password (empty when omitted), or the passphrase of an encrypted PEM.

    Raises:
        DecodeError: NOT_A_PRIVATE_KEY, CONTAINER_PARSE_FAILED or NO_KEY_BAG_PRESENT.
    """
    if is_pem(data):
        return _decode_pem(data.strip(), password)

    return _decode_pkcs12(data, password or "")


def _private_key_block(data: bytes) -> bytes:
    """The first PEM block labelled as a private key, so key files bundled with certificates work."""
    for match in PEM_BLOCK.finditer(data):
        if match.group(1).endswith(b"PRIVATE KEY"):
            return match.group(0)

    return data


def _decode_pem(data: bytes, password: Optional[str]) -> KeyMaterial:
    data = _private_key_block(data)
    # a passphrase is only accepted by encrypted PEM, plain PEM rejects one
    passphrase = password.encode("utf-8") if password and b"ENCRYPTED" in data else None

    try:
        private_key = serialization.load_pem_private_key(data, password=passphrase)
    except (ValueError, TypeError, UnsupportedAlgorithm) as error:
        logger.debug("PEM private key rejected (%s)", type(error).__name__)
        raise DecodeError(DecodeErrorType.NOT_A_PRIVATE_KEY) from None

    return KeyMaterial.from_private_key(private_key)


def _decode_pkcs12(data: bytes, password: str) -> KeyMaterial:
    try:
        private_key = _pkcs12.load_private_key(data, password)
        bags = _pkcs12.key_bags(data)
    except (ValueError, TypeError, KeyError, UnsupportedAlgorithm) as error:
        # bad ASN.1 and a wrong password are indistinguishable here
        logger.debug("PKCS#12 container rejected (%s)", type(error).__name__)
        raise DecodeError(DecodeErrorType.CONTAINER_PARSE_FAILED) from None

    if len(bags) > 1 or (private_key is None and bags):
        bag = select_key_bag(bags)
        logger.debug("PKCS#12 container holds %d key bag(s), using the first %s", len(bags), bag["bag_id"].native)

        try:
            private_key = _pkcs12.load_bag_private_key(bag, password)
        except (ValueError, TypeError, UnsupportedAlgorithm) as error:
            logger.debug("PKCS#12 key bag rejected (%s)", type(error).__name__)
            raise DecodeError(DecodeErrorType.CONTAINER_PARSE_FAILED) from None

    if private_key is None:
        raise DecodeError(DecodeErrorType.NO_KEY_BAG_PRESENT)

    return KeyMaterial.from_private_key(private_key)


def select_key_bag(bags):
    """
    First shrouded key bag, else first plain key bag, else ``None``.

    When several keys are present only the first match is used; the bag
    order of the container decides, not any property of the keys.
    """
    for bag_id in KEY_BAG_PRECEDENCE:
        for bag in bags:
            if bag["bag_id"].native == bag_id:
                return bag

    return None
