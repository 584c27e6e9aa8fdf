import base64
import binascii
from typing import Optional, Sequence

from ..entities import Base64Pkcs12, ConfigurationError, ConfigurationErrorType, CredentialSource, DecodeError, DecodeErrorType, FilePath, InlinePem, KeyMaterial
from ..utils.logging_utils import get_logger
from .key_material import KeyMaterialCache, decode, is_pem

logger = get_logger()


class CredentialResolver:
    """
    Resolves the signing key from an ordered list of credential sources.

    Sources without a value are skipped. The first source holding a value
    decides: if it fails to decode the failure is reported, the next source
    is not tried.
    """

    def __init__(
        self,
        sources: Sequence[CredentialSource],
        cache: Optional[KeyMaterialCache] = None,
    ):
        self.sources = tuple(sources)
        self.cache = cache

    def resolve(self) -> KeyMaterial:
        for source in self.sources:
            if not source.is_present():
                logger.trace("credential source %s not configured, skipping", source.identifier)
                continue

            raw, password = self._read(source)

            try:
                if self.cache is not None:
                    key_material = self.cache.get_or_decode(raw, password, decode)
                else:
                    key_material = decode(raw, password)
            except DecodeError as error:
                logger.error("signing key from %s could not be decoded: %s", source.identifier, error.error_type.value)
                raise ConfigurationError(ConfigurationErrorType.INVALID_CREDENTIAL, source=source.identifier, cause=error) from error

            logger.debug("signing key resolved from %s", source.identifier)
            return key_material

        raise ConfigurationError(ConfigurationErrorType.NO_CREDENTIAL_SUPPLIED)

    def _read(self, source: CredentialSource) -> tuple[bytes, str]:
        if isinstance(source, InlinePem):
            return self._read_inline_pem(source), ""

        if isinstance(source, Base64Pkcs12):
            return self._read_base64(source), source.password_value()

        if isinstance(source, FilePath):
            return self._read_file(source), source.password_value()

        raise TypeError(f"unknown credential source: {type(source).__name__}")

    @staticmethod
    def _read_inline_pem(source: InlinePem) -> bytes:
        text = source.text.get_secret_value().strip()

        # single-line environment values often carry escaped newlines
        if "\n" not in text and "\\n" in text:
            text = text.replace("\\n", "\n")

        raw = text.encode("utf-8")
        if not is_pem(raw):
            error = DecodeError(DecodeErrorType.NOT_A_PRIVATE_KEY, "the inline value is not PEM armored.")
            raise ConfigurationError(ConfigurationErrorType.INVALID_CREDENTIAL, source=source.identifier, cause=error)

        return raw

    @staticmethod
    def _read_base64(source: Base64Pkcs12) -> bytes:
        blob = "".join(source.blob.get_secret_value().split())

        try:
            return base64.b64decode(blob, validate=True)
        except (binascii.Error, ValueError):
            error = DecodeError(DecodeErrorType.CONTAINER_PARSE_FAILED, "the value is not valid base64.")
            raise ConfigurationError(ConfigurationErrorType.INVALID_CREDENTIAL, source=source.identifier, cause=error) from None

    @staticmethod
    def _read_file(source: FilePath) -> bytes:
        try:
            with open(source.path, "rb") as fd:
                return fd.read()
        except OSError as error:
            logger.error("signing key file %s could not be read: %s", source.path, error.strerror or type(error).__name__)
            raise ConfigurationError(ConfigurationErrorType.CREDENTIAL_UNREADABLE, source=source.identifier) from None
