from sqlalchemy import Column, Integer, Float
from models.base import Base


class Unemployment(Base):
    """Public health statistics per community area (one row per area)"""
    __tablename__ = "unemployment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    community_area = Column(Integer, index=True)
    below_poverty_level = Column(Float)
    per_capita_income = Column(Integer)
    unemployment = Column(Float)
