from sqlalchemy import Boolean, Column, Integer, String, Text

from app.models.base import Base


class CatalogCourse(Base):
    __tablename__ = "catalog_courses"

    id = Column(Integer, primary_key=True, index=True)
    catalog_year = Column(String, nullable=False, index=True)
    code = Column(String, nullable=False, index=True)  # e.g., "CPTS 121"
    prefix = Column(String, nullable=True)
    number = Column(String, nullable=True)
    title = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    credits = Column(Integer, nullable=True)
    credits_phrase = Column(String, nullable=True)  # e.g., "1-4" for variable credit
    ucore = Column(String, nullable=True)  # comma-separated UCORE designations
    prerequisite_raw = Column(Text, nullable=True)
    prerequisite_codes = Column(Text, nullable=True)  # JSON list, e.g. '["MATH 171"]'
    offered_terms = Column(Text, nullable=True)  # JSON list, e.g. '["fall","spring"]'
    footnotes = Column(Text, nullable=True)
    attributes = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    allow_concurrent = Column(Boolean, default=False)
