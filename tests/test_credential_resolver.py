import base64

import pytest
from pydantic import SecretStr

from key_factory import PKCS12_PASSWORD, modern_pkcs12, pkcs8_pem, traditional_pem
from merchant_locator.entities import (
    Base64Pkcs12,
    ConfigurationError,
    ConfigurationErrorType,
    DecodeErrorType,
    FilePath,
    InlinePem,
)
from merchant_locator.services.credential_resolver import CredentialResolver
from merchant_locator.services.key_material import KeyMaterialCache


def secret(value):
    return SecretStr(value) if value is not None else None


def sources(pem=None, blob=None, path=None, password=None):
    return [
        InlinePem(secret(pem)),
        Base64Pkcs12(secret(blob), secret(password)),
        FilePath(path, secret(password)),
    ]


@pytest.fixture
def p12_file(tmp_path, rsa_key):
    path = tmp_path / "signing-key.p12"
    path.write_bytes(modern_pkcs12(rsa_key))
    return path


class TestEquivalentSources:

    def test_all_sources_yield_identical_pem(self, tmp_path, rsa_key, p12_file):
        pem_file = tmp_path / "signing-key.pem"
        pem_file.write_bytes(traditional_pem(rsa_key))
        blob = base64.b64encode(modern_pkcs12(rsa_key)).decode()

        resolved = [
            CredentialResolver(sources(pem=traditional_pem(rsa_key).decode())).resolve(),
            CredentialResolver(sources(blob=blob, password=PKCS12_PASSWORD)).resolve(),
            CredentialResolver(sources(path=str(p12_file), password=PKCS12_PASSWORD)).resolve(),
            CredentialResolver(sources(path=str(pem_file))).resolve(),
        ]

        expected = pkcs8_pem(rsa_key)
        assert [key_material.reveal_pem() for key_material in resolved] == [expected] * 4

    def test_base64_with_line_breaks(self, rsa_key, rsa_pem):
        encoded = base64.encodebytes(modern_pkcs12(rsa_key)).decode()
        assert "\n" in encoded

        resolver = CredentialResolver(sources(blob=encoded, password=PKCS12_PASSWORD))

        assert resolver.resolve().reveal_pem() == rsa_pem

    def test_inline_pem_with_escaped_newlines(self, rsa_pem):
        escaped = rsa_pem.strip().replace("\n", "\\n")

        resolver = CredentialResolver(sources(pem=escaped))

        assert resolver.resolve().reveal_pem() == rsa_pem


class TestPrecedence:

    def test_inline_pem_comes_first(self, rsa_key, other_rsa_key, p12_file):
        resolver = CredentialResolver(sources(
            pem=pkcs8_pem(other_rsa_key),
            path=str(p12_file),
            password=PKCS12_PASSWORD,
        ))

        assert resolver.resolve().reveal_pem() == pkcs8_pem(other_rsa_key)

    def test_blank_sources_are_skipped(self, rsa_pem, p12_file):
        resolver = CredentialResolver(sources(pem="   ", blob="", path=str(p12_file), password=PKCS12_PASSWORD))

        assert resolver.resolve().reveal_pem() == rsa_pem

    def test_broken_source_does_not_fall_through(self, p12_file):
        resolver = CredentialResolver(sources(
            blob=base64.b64encode(b"definitely not a container").decode(),
            path=str(p12_file),
            password=PKCS12_PASSWORD,
        ))

        with pytest.raises(ConfigurationError) as excinfo:
            resolver.resolve()

        assert excinfo.value.error_type == ConfigurationErrorType.INVALID_CREDENTIAL
        assert excinfo.value.source == "base64-pkcs12"
        assert excinfo.value.cause.error_type == DecodeErrorType.CONTAINER_PARSE_FAILED

    def test_custom_order_is_respected(self, rsa_key, other_rsa_key, p12_file):
        resolver = CredentialResolver([
            FilePath(str(p12_file), SecretStr(PKCS12_PASSWORD)),
            InlinePem(SecretStr(pkcs8_pem(other_rsa_key))),
        ])

        assert resolver.resolve().reveal_pem() == pkcs8_pem(rsa_key)


class TestFailures:

    def test_nothing_configured(self):
        with pytest.raises(ConfigurationError) as excinfo:
            CredentialResolver(sources()).resolve()

        assert excinfo.value.error_type == ConfigurationErrorType.NO_CREDENTIAL_SUPPLIED

    def test_missing_file(self, tmp_path):
        resolver = CredentialResolver(sources(path=str(tmp_path / "missing.p12")))

        with pytest.raises(ConfigurationError) as excinfo:
            resolver.resolve()

        assert excinfo.value.error_type == ConfigurationErrorType.CREDENTIAL_UNREADABLE
        assert "missing.p12" in excinfo.value.source

    def test_invalid_base64(self):
        resolver = CredentialResolver(sources(blob="%%% not base64 %%%"))

        with pytest.raises(ConfigurationError) as excinfo:
            resolver.resolve()

        assert excinfo.value.error_type == ConfigurationErrorType.INVALID_CREDENTIAL
        assert "%%%" not in str(excinfo.value)

    def test_inline_value_that_is_not_pem(self):
        resolver = CredentialResolver(sources(pem="MIIEvQIBADANBgkqhkiG9w0BAQEFAASC"))

        with pytest.raises(ConfigurationError) as excinfo:
            resolver.resolve()

        assert excinfo.value.cause.error_type == DecodeErrorType.NOT_A_PRIVATE_KEY
        assert "MIIEvQIBADANBgkqhkiG9w0BAQEFAASC" not in str(excinfo.value)

    def test_wrong_password_names_source_not_secret(self, p12_file):
        resolver = CredentialResolver(sources(path=str(p12_file), password="hunter2"))

        with pytest.raises(ConfigurationError) as excinfo:
            resolver.resolve()

        message = str(excinfo.value)
        assert excinfo.value.cause.error_type == DecodeErrorType.CONTAINER_PARSE_FAILED
        assert "hunter2" not in message
        assert f"file:{p12_file}" in message


class TestResolverWithCache:

    def test_decoded_key_is_reused(self, rsa_pem):
        resolver = CredentialResolver(sources(pem=rsa_pem), cache=KeyMaterialCache(ttl=3600))

        assert resolver.resolve() is resolver.resolve()

    def test_resolver_picks_up_rotated_file(self, tmp_path, rsa_key, other_rsa_key):
        path = tmp_path / "signing-key.pem"
        path.write_text(pkcs8_pem(rsa_key))
        resolver = CredentialResolver(sources(path=str(path)), cache=KeyMaterialCache(ttl=3600))

        assert resolver.resolve().reveal_pem() == pkcs8_pem(rsa_key)

        path.write_text(pkcs8_pem(other_rsa_key))

        assert resolver.resolve().reveal_pem() == pkcs8_pem(other_rsa_key)
