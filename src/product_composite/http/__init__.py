from product_composite.http.error_translator import ErrorTranslator
from product_composite.http.query_client import QueryClient, build_http_client, degrade_to_empty

__all__ = [
    "ErrorTranslator",
    "QueryClient",
    "build_http_client",
    "degrade_to_empty",
]
