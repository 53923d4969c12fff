"""
Sample Set Codec
================

JSON encoding of the raw sample log.

The wire format is an ordered array of SampleRecord objects (see
signal_heatmap.models.input). Decoding validates the whole payload before
returning anything, so callers can apply the result all-or-nothing.

An empty array is a valid, empty dataset. Anything that is not a JSON
array of conforming records raises DataFormatError.
"""

import logging
from typing import Iterable, List, Union

from pydantic import TypeAdapter, ValidationError

from signal_heatmap.errors import DataFormatError
from signal_heatmap.models.input import SampleRecord
from signal_heatmap.models.sample import Sample


logger = logging.getLogger(__name__)


_RECORDS = TypeAdapter(List[SampleRecord])


def encode_samples(samples: Iterable[Sample]) -> bytes:
    """Serialize samples in order. Synthetic samples are skipped."""
    records = [SampleRecord.from_sample(s) for s in samples if not s.synthetic]
    return _RECORDS.dump_json(records, indent=2)


def decode_samples(data: Union[bytes, str]) -> List[Sample]:
    """
    Parse a serialized sample set.

    Args:
        data: JSON payload

    Returns:
        Samples in payload order

    Raises:
        DataFormatError: If the payload is not valid JSON or any record
            fails validation
    """
    try:
        records = _RECORDS.validate_json(data)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        detail = first.get("msg", str(exc))
        if location:
            detail = f"{location}: {detail}"
        logger.warning(f"Rejected sample payload ({exc.error_count()} errors): {detail}")
        raise DataFormatError(detail) from exc
    return [record.to_sample() for record in records]
