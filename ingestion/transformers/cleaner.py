"""
Validate and clean raw feed records into typed records.

Each dataset has an ordered list of field checks. The first failing check
discards the record with a named RejectionReason; nothing is coerced and no
defaults are substituted.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel
from core.exceptions import ValidationDiscard
from models.base import Dataset, RejectionReason
from schemas.raw import RawTrip, RawUnemployment, RawPermit, RawCovid, RawCCVI, RawBoundary
from schemas.cleaned import (
    CleanedTrip,
    CleanedUnemployment,
    CleanedPermit,
    CleanedCovid,
    CleanedCCVI,
    CleanedBoundary,
)
import logging
import math
import re

logger = logging.getLogger(__name__)

# YYYY-MM-DDTHH:MM:SS.mmm
MIN_TIMESTAMP_LENGTH = 23

# Plain ASCII literals only: no padding, digit separators or non-ASCII digits
INT_LITERAL = re.compile(r"[+-]?[0-9]+")
FLOAT_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass
class RecordOutcome:
    """Result of checking one record: either accepted or rejected with a reason"""
    record: Optional[BaseModel] = None
    reason: Optional[RejectionReason] = None
    field_name: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.record is not None

    @classmethod
    def accept(cls, record: BaseModel) -> "RecordOutcome":
        return cls(record=record)

    @classmethod
    def reject(cls, reason: RejectionReason, field_name: str) -> "RecordOutcome":
        return cls(reason=reason, field_name=field_name)


def require_text(value: str, field_name: str) -> str:
    if value == "":
        raise ValidationDiscard(RejectionReason.MISSING_FIELD, field_name, value)
    return value


def parse_int(value: str, field_name: str) -> int:
    if not INT_LITERAL.fullmatch(value):
        raise ValidationDiscard(RejectionReason.UNPARSEABLE_NUMBER, field_name, value)
    return int(value)


def parse_float(value: str, field_name: str) -> float:
    if not FLOAT_LITERAL.fullmatch(value):
        raise ValidationDiscard(RejectionReason.UNPARSEABLE_NUMBER, field_name, value)
    parsed = float(value)
    if not math.isfinite(parsed):
        raise ValidationDiscard(RejectionReason.UNPARSEABLE_NUMBER, field_name, value)
    return parsed


def parse_timestamp(value: str, field_name: str) -> datetime:
    """Parse a feed timestamp, stored as naive feed-local time"""
    if len(value) < MIN_TIMESTAMP_LENGTH:
        raise ValidationDiscard(RejectionReason.MALFORMED_TIMESTAMP, field_name, value)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationDiscard(RejectionReason.MALFORMED_TIMESTAMP, field_name, value)
    return parsed.replace(tzinfo=None)


class RecordCleaner:
    """
    Apply the ordered field checks for one dataset.

    Usage:
        cleaner = RecordCleaner(Dataset.TRIPS)
        outcome = cleaner.clean(raw_trip)
        if outcome.accepted:
            ...
    """

    def __init__(self, dataset: Dataset):
        self.dataset = dataset

    def clean(self, raw: BaseModel) -> RecordOutcome:
        try:
            if self.dataset == Dataset.TRIPS:
                record = self._clean_trip(raw)
            elif self.dataset == Dataset.UNEMPLOYMENT:
                record = self._clean_unemployment(raw)
            elif self.dataset == Dataset.PERMITS:
                record = self._clean_permit(raw)
            elif self.dataset == Dataset.COVID:
                record = self._clean_covid(raw)
            elif self.dataset == Dataset.CCVI:
                record = self._clean_ccvi(raw)
            elif self.dataset == Dataset.BOUNDARIES:
                record = self._clean_boundary(raw)
            else:
                raise ValueError(f"Unknown dataset: {self.dataset}")
        except ValidationDiscard as e:
            logger.debug(f"Discarding {self.dataset.value} record: {e.message}")
            return RecordOutcome.reject(e.reason, e.field_name)

        return RecordOutcome.accept(record)

    def _clean_trip(self, raw: RawTrip) -> CleanedTrip:
        trip_id = require_text(raw.trip_id, "trip_id")
        start = parse_timestamp(raw.trip_start_timestamp, "trip_start_timestamp")
        end = parse_timestamp(raw.trip_end_timestamp, "trip_end_timestamp")

        coordinates = {}
        for name in (
            "pickup_centroid_latitude",
            "pickup_centroid_longitude",
            "dropoff_centroid_latitude",
            "dropoff_centroid_longitude",
        ):
            coordinates[name] = parse_float(require_text(getattr(raw, name), name), name)

        return CleanedTrip(
            trip_id=trip_id,
            trip_start_timestamp=start,
            trip_end_timestamp=end,
            **coordinates,
        )

    def _clean_unemployment(self, raw: RawUnemployment) -> CleanedUnemployment:
        community_area = parse_int(
            require_text(raw.community_area, "community_area"), "community_area"
        )
        return CleanedUnemployment(
            community_area=community_area,
            below_poverty_level=parse_float(raw.below_poverty_level, "below_poverty_level"),
            per_capita_income=parse_int(raw.per_capita_income, "per_capita_income"),
            unemployment=parse_float(raw.unemployment, "unemployment"),
        )

    def _clean_permit(self, raw: RawPermit) -> CleanedPermit:
        permit_id = require_text(raw.id, "id")
        permit_type = require_text(raw.permit_type, "permit_type")
        community_area = parse_int(raw.community_area, "community_area")
        latitude = parse_float(require_text(raw.latitude, "latitude"), "latitude")
        longitude = parse_float(require_text(raw.longitude, "longitude"), "longitude")

        return CleanedPermit(
            id=permit_id,
            permit_type=permit_type,
            community_area=community_area,
            latitude=latitude,
            longitude=longitude,
        )

    def _clean_covid(self, raw: RawCovid) -> CleanedCovid:
        row_id = require_text(raw.row_id, "row_id")
        zip_code = require_text(raw.zip_code, "zip_code")
        week_number = parse_int(raw.week_number, "week_number")
        week_start = parse_timestamp(raw.week_start, "week_start")
        week_end = parse_timestamp(raw.week_end, "week_end")

        return CleanedCovid(
            row_id=row_id,
            zip_code=zip_code,
            week_number=week_number,
            week_start=week_start,
            week_end=week_end,
            cases_weekly=parse_int(raw.cases_weekly, "cases_weekly"),
            tests_weekly=parse_int(raw.tests_weekly, "tests_weekly"),
            percent_tested_positive_weekly=parse_float(
                raw.percent_tested_positive_weekly, "percent_tested_positive_weekly"
            ),
        )

    def _clean_ccvi(self, raw: RawCCVI) -> CleanedCCVI:
        geography_type = require_text(raw.geography_type, "geography_type")
        area_or_zip = parse_int(raw.community_area_or_zip, "community_area_or_zip")
        ccvi_score = parse_float(raw.ccvi_score, "ccvi_score")
        ccvi_category = require_text(raw.ccvi_category, "ccvi_category")

        return CleanedCCVI(
            geography_type=geography_type,
            community_area_or_zip=area_or_zip,
            community_area_name=raw.community_area_name or None,
            ccvi_score=ccvi_score,
            ccvi_category=ccvi_category,
        )

    def _clean_boundary(self, raw: RawBoundary) -> CleanedBoundary:
        community_area = parse_int(
            require_text(raw.community_area, "community_area"), "community_area"
        )
        zip_code = require_text(raw.zip_code, "zip_code")

        return CleanedBoundary(community_area=str(community_area), zip_code=zip_code)
