from .merchant_api import MerchantApiServices as MerchantApiServices
from .merchant_api import create_merchant_api as create_merchant_api
