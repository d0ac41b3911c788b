from app.models.course import CatalogCourse

__all__ = ["CatalogCourse"]
