from .cache import KeyMaterialCache as KeyMaterialCache
from .decoder import decode as decode
from .decoder import is_pem as is_pem
