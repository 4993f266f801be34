"""Labs module - the catalogue of labs students can apply to."""

from .router import router

__all__ = ["router"]
