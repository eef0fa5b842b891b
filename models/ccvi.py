from sqlalchemy import Column, Integer, String, Float
from models.base import Base


class CCVI(Base):
    """
    COVID community vulnerability index.

    geography_type is "CA" (community area) or "ZIP"; community_area_or_zip
    holds the area number or the zip code accordingly.
    """
    __tablename__ = "ccvi"

    id = Column(Integer, primary_key=True, autoincrement=True)
    geography_type = Column(String(16), index=True)
    community_area_or_zip = Column(Integer, index=True)
    community_area_name = Column(String(255), nullable=True)
    ccvi_score = Column(Float)
    ccvi_category = Column(String(32), index=True)
