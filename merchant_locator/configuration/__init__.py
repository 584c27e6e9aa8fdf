from .properties import AppConfig as AppConfig
from .properties import CredentialsConfig as CredentialsConfig
from .properties import DEFAULT_MERCHANT_SEARCH_URL as DEFAULT_MERCHANT_SEARCH_URL
from .properties import FileLoggingConfig as FileLoggingConfig
from .properties import LoggingConfig as LoggingConfig
from .properties import ServerConfig as ServerConfig
from .properties import UpstreamConfig as UpstreamConfig

example_configuration_text = """\
logging:
  level: info

credentials:
  consumer-key: ${MASTERCARD_CONSUMER_KEY}
  # one of the three key sources below, tried in this order
  # signing-key-pem: ${MASTERCARD_SIGNING_KEY_PEM}
  # signing-key-p12-base64: ${MASTERCARD_SIGNING_KEY_P12_BASE64}
  signing-key-path: keys/signing-key.p12
  signing-key-password: ${MASTERCARD_SIGNING_KEY_PASSWORD}
  cache-ttl: 0

upstream:
  merchant-search-url: https://api.mastercard.com/places/v1/merchant
  timeout: 5

server:
  host: 127.0.0.1
  port: 3000
"""
