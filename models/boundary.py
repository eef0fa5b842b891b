from sqlalchemy import Column, Integer, String, cast
from sqlalchemy.orm import column_property
from models.base import Base


class Boundary(Base):
    """
    Community area to zip code crosswalk.

    community_area is stored as text. Joins against the integer community
    area columns (ccvi, unemployment, permit) must go through
    community_area_id, which is the only place the cast is written.
    """
    __tablename__ = "boundaries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    community_area = Column(String(16), index=True)
    zip_code = Column(String(255), index=True)

    community_area_id = column_property(cast(community_area, Integer))
