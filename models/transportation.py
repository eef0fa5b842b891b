from sqlalchemy import Column, Integer, String, DateTime, Float
from models.base import Base


class Transportation(Base):
    """
    Taxi and rideshare trips with reverse-geocoded pickup/dropoff zip codes.

    Both trip feeds land here; trip_id is unique across them, so a duplicate
    id aborts the load.
    """
    __tablename__ = "transportation"

    id = Column(Integer, primary_key=True, autoincrement=True)
    trip_id = Column(String(255), unique=True)

    trip_start_timestamp = Column(DateTime)
    trip_end_timestamp = Column(DateTime)

    pickup_centroid_latitude = Column(Float)
    pickup_centroid_longitude = Column(Float)
    dropoff_centroid_latitude = Column(Float)
    dropoff_centroid_longitude = Column(Float)

    # Derived by enrichment
    pickup_zip_code = Column(String(255), index=True)
    dropoff_zip_code = Column(String(255), index=True)
