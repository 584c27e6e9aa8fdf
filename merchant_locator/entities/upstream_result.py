from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class UpstreamSuccess:
    request_url: str
    status_code: int
    body: Any


@dataclass(frozen=True)
class UpstreamError:
    """Non-2xx answer of the upstream API, body kept exactly as parsed."""

    request_url: str
    status_code: int
    status_text: str
    body: Any


@dataclass(frozen=True)
class TransportError:
    """The upstream API could not be reached or did not answer in time."""

    request_url: str
    cause: Exception
    timed_out: bool = False

    @property
    def message(self) -> str:
        return str(self.cause) or type(self.cause).__name__


UpstreamResult = Union[UpstreamSuccess, UpstreamError, TransportError]
