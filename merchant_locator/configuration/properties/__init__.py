import os
import re
from typing import Mapping, Optional

from pydantic import Field, ValidationError

from ._base import BaseConfig as _BaseConfig
from ._credentials import CredentialsConfig
from ._logging import FileLoggingConfig as FileLoggingConfig
from ._logging import LoggingConfig
from ._upstream import DEFAULT_MERCHANT_SEARCH_URL as DEFAULT_MERCHANT_SEARCH_URL
from ._upstream import ServerConfig, UpstreamConfig

# environment variable -> (section, field)
ENVIRONMENT_VARIABLES = {
    "MASTERCARD_CONSUMER_KEY": ("credentials", "consumer_key"),
    "MASTERCARD_SIGNING_KEY_PEM": ("credentials", "signing_key_pem"),
    "MASTERCARD_SIGNING_KEY_P12_BASE64": ("credentials", "signing_key_p12_base64"),
    "MASTERCARD_SIGNING_KEY_PATH": ("credentials", "signing_key_path"),
    "MASTERCARD_SIGNING_KEY_PASSWORD": ("credentials", "signing_key_password"),
    "MASTERCARD_KEY_CACHE_TTL": ("credentials", "cache_ttl"),
    "MASTERCARD_PLACES_MERCHANT_SEARCH_URL": ("upstream", "merchant_search_url"),
    "MASTERCARD_PLACES_TIMEOUT": ("upstream", "timeout"),
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "LOG_LEVEL": ("logging", "level"),
}


ENVIRONMENT_REFERENCE = re.compile(r"\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))")


def expand_environment_variables(text: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Like ``os.path.expandvars``, but an unset variable expands to an empty string."""
    if environ is None:
        environ = os.environ

    return ENVIRONMENT_REFERENCE.sub(lambda match: environ.get(match.group(1) or match.group(2), ""), text)


class AppConfig(_BaseConfig):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @staticmethod
    def from_yaml(yaml_content: str, *, exit_on_failure=True) -> 'AppConfig':
        import yaml
        expanded = expand_environment_variables(yaml_content)
        data = yaml.safe_load(expanded) or {}

        return AppConfig._validate(data, exit_on_failure=exit_on_failure)

    @staticmethod
    def from_file(file_path: str, *, exit_on_failure=True) -> 'AppConfig':
        with open(file_path, 'r') as f:
            return AppConfig.from_yaml(f.read(), exit_on_failure=exit_on_failure)

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None, *, exit_on_failure=True) -> 'AppConfig':
        """Build the configuration from the MASTERCARD_* variables. Blank values count as unset."""
        if environ is None:
            environ = os.environ

        data: dict = {}
        for variable, (section, field) in ENVIRONMENT_VARIABLES.items():
            value = environ.get(variable)
            if value is None or not value.strip():
                continue

            if field == "level":
                value = value.lower()

            data.setdefault(section, {})[field] = value

        return AppConfig._validate(data, exit_on_failure=exit_on_failure)

    @staticmethod
    def _validate(data: dict, *, exit_on_failure: bool) -> 'AppConfig':
        try:
            return AppConfig(**data)
        except ValidationError as validation_error:
            if not exit_on_failure:
                raise

            # input values are left out, they may hold secrets
            for error in validation_error.errors():
                print(error["type"], error["loc"], error["msg"])

            exit(1)
