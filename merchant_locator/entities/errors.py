from enum import Enum


class ErrorType(Enum):
    @property
    def default_reason(self):
        return DEFAULT_REASONS.get(self, "No specific reason provided.")


class ConfigurationErrorType(ErrorType):
    NO_CREDENTIAL_SUPPLIED = "NO_CREDENTIAL_SUPPLIED"
    MISSING_CONSUMER_KEY = "MISSING_CONSUMER_KEY"
    CREDENTIAL_UNREADABLE = "CREDENTIAL_UNREADABLE"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"


class DecodeErrorType(ErrorType):
    NOT_A_PRIVATE_KEY = "NOT_A_PRIVATE_KEY"
    CONTAINER_PARSE_FAILED = "CONTAINER_PARSE_FAILED"
    NO_KEY_BAG_PRESENT = "NO_KEY_BAG_PRESENT"


class SigningErrorType(ErrorType):
    INVALID_KEY = "SIGNING_INVALID_KEY"


class ValidationErrorType(ErrorType):
    INVALID_COORDINATES = "INVALID_COORDINATES"


DEFAULT_REASONS = {
    ConfigurationErrorType.NO_CREDENTIAL_SUPPLIED: "No signing key configured. Set MASTERCARD_SIGNING_KEY_PEM, MASTERCARD_SIGNING_KEY_P12_BASE64 or MASTERCARD_SIGNING_KEY_PATH.",
    ConfigurationErrorType.MISSING_CONSUMER_KEY: "Missing required env var: MASTERCARD_CONSUMER_KEY",
    ConfigurationErrorType.CREDENTIAL_UNREADABLE: "The configured signing key could not be read.",
    ConfigurationErrorType.INVALID_CREDENTIAL: "The configured signing key could not be decoded.",
    DecodeErrorType.NOT_A_PRIVATE_KEY: "The PEM data is not a well-formed private key.",
    DecodeErrorType.CONTAINER_PARSE_FAILED: "The PKCS#12 container could not be parsed; it is malformed or the password is wrong.",
    DecodeErrorType.NO_KEY_BAG_PRESENT: "The PKCS#12 container holds no private key.",
    SigningErrorType.INVALID_KEY: "The signing key cannot be used for RSA-SHA256 signatures.",
    ValidationErrorType.INVALID_COORDINATES: "Missing/invalid lat,lng query params (numbers required).",
}
