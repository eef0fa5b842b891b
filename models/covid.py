from sqlalchemy import Column, Integer, String, DateTime, Float
from models.base import Base


class Covid(Base):
    """
    Weekly COVID-19 cases and tests per zip code.

    row_id is the portal's "<zip>-<year>-<week>" key.
    """
    __tablename__ = "covid"

    row_id = Column(String(255), primary_key=True)
    zip_code = Column(String(255), index=True)
    week_number = Column(Integer)
    week_start = Column(DateTime)
    week_end = Column(DateTime)
    cases_weekly = Column(Integer)
    tests_weekly = Column(Integer)
    percent_tested_positive_weekly = Column(Float)
