from .apartment import (
    ApartmentCreate,
    ApartmentUpdate,
    ApartmentFilters,
    ApartmentResponse,
    ApartmentPage,
    ApartmentListResponse,
    ApartmentEnvelope,
    PaginationMeta,
    LocationsResponse,
    QuickSearchResponse,
    MessageResponse,
)

__all__ = [
    "ApartmentCreate",
    "ApartmentUpdate",
    "ApartmentFilters",
    "ApartmentResponse",
    "ApartmentPage",
    "ApartmentListResponse",
    "ApartmentEnvelope",
    "PaginationMeta",
    "LocationsResponse",
    "QuickSearchResponse",
    "MessageResponse",
]
