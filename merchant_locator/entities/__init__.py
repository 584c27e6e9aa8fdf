from .credential_source import Base64Pkcs12 as Base64Pkcs12
from .credential_source import CredentialSource as CredentialSource
from .credential_source import FilePath as FilePath
from .credential_source import InlinePem as InlinePem
from .errors import ConfigurationErrorType, DecodeErrorType, ErrorType, SigningErrorType, ValidationErrorType
from .exceptions import ConfigurationError, DecodeError, MerchantLocatorError, SigningError, ValidationError
from .key_material import KeyMaterial as KeyMaterial
from .search import SearchParams as SearchParams
from .signing import AuthorizationHeader, SigningRequest
from .upstream_result import TransportError, UpstreamError, UpstreamResult, UpstreamSuccess
