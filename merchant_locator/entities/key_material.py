import hashlib
import hmac

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes


class KeyMaterial:
    """
    A resolved private key, normalized to unencrypted PKCS#8 PEM.

    The value refuses to print or pickle itself: ``repr``/``str`` are redacted
    and ``__reduce__`` raises, so it cannot end up in a log line, a response
    or a cache on disk by accident. Use :meth:`reveal_pem` or
    :meth:`private_key` at the one place that needs the secret.
    """

    __slots__ = ("_pem",)

    def __init__(self, pem: str):
        self._pem = pem

    @classmethod
    def from_private_key(cls, private_key: PrivateKeyTypes) -> "KeyMaterial":
        pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cls(pem.decode("ascii"))

    def reveal_pem(self) -> str:
        return self._pem

    def private_key(self) -> PrivateKeyTypes:
        return serialization.load_pem_private_key(self._pem.encode("ascii"), password=None)

    def fingerprint(self) -> str:
        """SHA-256 of the DER SubjectPublicKeyInfo, safe to log."""
        public_der = self.private_key().public_key().public_bytes(
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        return hashlib.sha256(public_der).hexdigest()

    def __eq__(self, other):
        if not isinstance(other, KeyMaterial):
            return NotImplemented
        return hmac.compare_digest(self._pem.encode("ascii"), other._pem.encode("ascii"))

    __hash__ = None

    def __repr__(self):
        return "KeyMaterial('**********')"

    __str__ = __repr__

    def __reduce__(self):
        raise TypeError("KeyMaterial cannot be serialized")
