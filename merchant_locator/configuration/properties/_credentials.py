from typing import List, Optional

from pydantic import Field, SecretStr, field_validator

from ...entities.credential_source import Base64Pkcs12, CredentialSource, FilePath, InlinePem
from ._base import BaseConfig as _BaseConfig


class CredentialsConfig(_BaseConfig):
    consumer_key: Optional[SecretStr] = Field(None, description="OAuth consumer key issued with the signing key")
    signing_key_pem: Optional[SecretStr] = Field(None, description="Inline PEM-encoded private key")
    signing_key_p12_base64: Optional[SecretStr] = Field(None, description="Base64-encoded PKCS#12 container holding the private key")
    signing_key_path: Optional[str] = Field(None, description="Path to a PEM or PKCS#12 file holding the private key")
    signing_key_password: Optional[SecretStr] = Field(None, description="Password of the PKCS#12 container or encrypted PEM file. Empty when omitted.")
    cache_ttl: float = Field(0.0, ge=0, description="Seconds a decoded key may be reused across requests. 0 disables the cache.")

    @field_validator("consumer_key", "signing_key_pem", "signing_key_p12_base64", "signing_key_path", "signing_key_password", mode="before")
    def empty_str_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def sources(self) -> List[CredentialSource]:
        """Credential sources in resolution order: inline PEM, base64 PKCS#12, then file."""
        return [
            InlinePem(self.signing_key_pem),
            Base64Pkcs12(self.signing_key_p12_base64, self.signing_key_password),
            FilePath(self.signing_key_path, self.signing_key_password),
        ]
