"""
PKCS#12 (RFC 7292) key bag lookup.

cryptography authenticates the container and decrypts it. asn1crypto is
only used to list the key bags of the unencrypted safes in file order, so
that a container holding several keys resolves to a predictable one.
Encrypted safes are left to cryptography: in practice they hold the
certificates, often under legacy ciphers such as RC2-40.

Nothing in here logs or formats password or container bytes into messages.
"""

from typing import Iterator, List, Optional

from asn1crypto import pkcs12
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.hazmat.primitives.serialization import pkcs12 as openssl_pkcs12

SHROUDED_KEY_BAG = "pkcs8_shrouded_key_bag"
KEY_BAG = "key_bag"


class Pkcs12FormatError(ValueError):
    """The container is malformed or a key bag is not a key bag."""


def password_bytes(password: str) -> Optional[bytes]:
    return password.encode("utf-8") if password else None


def load_private_key(data: bytes, password: str) -> Optional[PrivateKeyTypes]:
    """
    Authenticate the container and return the key cryptography picks, if any.

    Raises:
        ValueError: the container is malformed or the password is wrong.
    """
    private_key, _, _ = openssl_pkcs12.load_key_and_certificates(data, password_bytes(password))
    return private_key


def _walk(safe_contents: pkcs12.SafeContents) -> Iterator[pkcs12.SafeBag]:
    for bag in safe_contents:
        if bag["bag_id"].native == "safe_contents":
            yield from _walk(bag["bag_value"])
        else:
            yield bag


def key_bags(data: bytes) -> List[pkcs12.SafeBag]:
    """Key bags and shrouded key bags of the unencrypted safes, in file order."""
    pfx = pkcs12.Pfx.load(data)

    return [
        bag
        for content_info in pfx.authenticated_safe
        if content_info["content_type"].native == "data"
        for bag in _walk(pkcs12.SafeContents.load(content_info["content"].native))
        if bag["bag_id"].native in (SHROUDED_KEY_BAG, KEY_BAG)
    ]


def load_bag_private_key(bag: pkcs12.SafeBag, password: str) -> PrivateKeyTypes:
    bag_id = bag["bag_id"].native
    der = bag["bag_value"].untag().dump()

    if bag_id == SHROUDED_KEY_BAG:
        return serialization.load_der_private_key(der, password=password_bytes(password))
    if bag_id == KEY_BAG:
        return serialization.load_der_private_key(der, password=None)

    raise Pkcs12FormatError(f"not a key bag: {bag_id}")
