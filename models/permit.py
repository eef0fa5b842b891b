from sqlalchemy import Column, Integer, String, Float
from models.base import Base


class Permit(Base):
    """Building permits keyed by the portal's permit id"""
    __tablename__ = "permit"

    id = Column(String(255), primary_key=True)
    permit_type = Column(String(255), index=True)
    community_area = Column(Integer, index=True)
    latitude = Column(Float)
    longitude = Column(Float)
    zip_code = Column(String(255))
