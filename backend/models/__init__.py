from .apartment import Apartment, ApartmentAmenity

__all__ = [
    "Apartment",
    "ApartmentAmenity",
]
