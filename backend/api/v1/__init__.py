from . import apartments

__all__ = [
    "apartments",
]
