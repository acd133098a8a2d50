from .normalizer import normalize
from .rate_limit import RateLimiter
from .routing import RecordKey, SourceKey, classify, parse_source_key

__all__ = [
    "RateLimiter",
    "RecordKey",
    "SourceKey",
    "classify",
    "normalize",
    "parse_source_key",
]
