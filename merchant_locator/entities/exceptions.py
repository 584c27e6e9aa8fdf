from .errors import ConfigurationErrorType, DecodeErrorType, ErrorType, SigningErrorType, ValidationErrorType


class MerchantLocatorError(Exception):
    """
    Base of every local failure of a search.

    The message is built from the error type and a reason only; callers must
    never put key bytes, passwords or container contents in the reason.
    """

    status_code = 500

    def __init__(self, error_type: ErrorType, reason: str = ""):
        self.error_type = error_type
        self.reason = reason or error_type.default_reason
        super().__init__(f"{error_type.value}: {self.reason}")


class DecodeError(MerchantLocatorError):

    def __init__(self, error_type: DecodeErrorType, reason: str = ""):
        super().__init__(error_type, reason)


class ConfigurationError(MerchantLocatorError):

    def __init__(self, error_type: ConfigurationErrorType, reason: str = "", source: str | None = None, cause: DecodeError | None = None):
        self.source = source
        self.cause = cause
        if not reason and source and cause:
            reason = f"credential source '{source}' is unusable: {cause.error_type.value}: {cause.reason}"
        elif not reason and source:
            reason = f"credential source '{source}': {error_type.default_reason}"
        super().__init__(error_type, reason)


class SigningError(MerchantLocatorError):

    def __init__(self, error_type: SigningErrorType = SigningErrorType.INVALID_KEY, reason: str = ""):
        super().__init__(error_type, reason)


class ValidationError(MerchantLocatorError):
    status_code = 400

    def __init__(self, error_type: ValidationErrorType = ValidationErrorType.INVALID_COORDINATES, reason: str = ""):
        super().__init__(error_type, reason)
