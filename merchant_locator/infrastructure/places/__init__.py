from ._client import PlacesClient as PlacesClient
from ._client import parse_body as parse_body
