from dataclasses import dataclass
from typing import Optional, Union

from pydantic import SecretStr


def _is_blank(value: Optional[SecretStr | str]) -> bool:
    if value is None:
        return True
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    return not value.strip()


def _password_of(password: Optional[SecretStr]) -> str:
    return password.get_secret_value() if password is not None else ""


@dataclass(frozen=True)
class InlinePem:
    text: Optional[SecretStr]

    @property
    def identifier(self) -> str:
        return "inline-pem"

    def is_present(self) -> bool:
        return not _is_blank(self.text)


@dataclass(frozen=True)
class Base64Pkcs12:
    blob: Optional[SecretStr]
    password: Optional[SecretStr] = None

    @property
    def identifier(self) -> str:
        return "base64-pkcs12"

    def is_present(self) -> bool:
        return not _is_blank(self.blob)

    def password_value(self) -> str:
        return _password_of(self.password)


@dataclass(frozen=True)
class FilePath:
    path: Optional[str]
    password: Optional[SecretStr] = None

    @property
    def identifier(self) -> str:
        return f"file:{self.path}"

    def is_present(self) -> bool:
        return not _is_blank(self.path)

    def password_value(self) -> str:
        return _password_of(self.password)


CredentialSource = Union[InlinePem, Base64Pkcs12, FilePath]
