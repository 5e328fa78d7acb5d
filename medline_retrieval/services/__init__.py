"""Service layer composing the E-utilities clients."""

from .cleanup import PROVIDER_ONLY_FIELDS, cleanup_record, cleanup_records
from .search_service import MedlineSearchService

__all__ = [
    "MedlineSearchService",
    "PROVIDER_ONLY_FIELDS",
    "cleanup_record",
    "cleanup_records",
]
