from .courses import router as courses_router

__all__ = ["courses_router"]
