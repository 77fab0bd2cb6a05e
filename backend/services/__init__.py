from .apartment_service import ApartmentService, entity_cache_key, listing_cache_key

__all__ = [
    "ApartmentService",
    "entity_cache_key",
    "listing_cache_key",
]
