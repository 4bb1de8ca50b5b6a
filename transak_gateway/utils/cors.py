from typing import Dict, List, Optional

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
MAX_AGE = "86400"


def resolve_allow_origin(allowed: List[str], request_origin: Optional[str]) -> str:
    if not allowed or "*" in allowed:
        return "*"
    if request_origin and request_origin in allowed:
        return request_origin
    return allowed[0]


def cors_headers(allowed: List[str], request_origin: Optional[str] = None) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": resolve_allow_origin(allowed, request_origin),
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": MAX_AGE,
    }
