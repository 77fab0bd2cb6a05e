from .apartment_repository import ApartmentRepository
from .apartment_query import ListingQuery, build_listing_query, build_pagination, is_default_listing

__all__ = [
    "ApartmentRepository",
    "ListingQuery",
    "build_listing_query",
    "build_pagination",
    "is_default_listing",
]
