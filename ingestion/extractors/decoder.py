"""
Decode feed payloads into typed raw records
"""

from typing import List, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel, TypeAdapter, ValidationError
from core.exceptions import DecodeError

RawT = TypeVar("RawT", bound=BaseModel)


def decode_records(
    payload: bytes,
    raw_model: Type[RawT],
    source: Optional[str] = None
) -> Tuple[List[RawT], Optional[DecodeError]]:
    """
    Parse a payload that must be a JSON array of flat objects.

    Source order is preserved. A malformed payload never raises: it yields
    an empty list together with the DecodeError, and the caller decides
    what to do with the error.
    """
    adapter = TypeAdapter(List[raw_model])

    try:
        return adapter.validate_json(payload), None
    except ValidationError as e:
        return [], DecodeError(
            f"Payload is not a JSON array of {raw_model.__name__} records",
            context={
                "source": source,
                "error_count": e.error_count(),
                "payload_head": payload[:200].decode("utf-8", errors="replace")
            },
            original_exception=e
        )
