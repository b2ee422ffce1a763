from .parse import router as parse_router

__all__ = ["parse_router"]
