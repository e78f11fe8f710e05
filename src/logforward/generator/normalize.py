"""Shared VRL fragments and the throttle factory."""

import logging
from typing import Optional, Sequence

from logforward.generator.elements import Element, Throttle

logger = logging.getLogger(__name__)

FIX_HOSTNAME = '.hostname = del(.host)'

FIX_TIMESTAMP_FIELD = '''
ts = del(.timestamp); if !exists(."@timestamp") {."@timestamp" = ts}
'''

PASS_THROUGH = '.'


def add_log_type(log_type: str) -> str:
    return f'.log_type = "{log_type}"'


def join_vrl(*fragments: str) -> str:
    """Join VRL statements one per line, trimming surrounding whitespace."""
    return "\n".join(f.strip() for f in fragments if f.strip())


def new_throttle(component_id: str, inputs: Sequence[str], threshold: int,
                 key_field: Optional[str] = None, window_secs: int = 1) -> list[Element]:
    """Build a throttle, or nothing when the threshold cannot be represented.

    The collector's throttle transform rejects a zero threshold, so a
    non-positive threshold yields an empty list.
    """
    if threshold <= 0:
        logger.debug("Skipping throttle %s: threshold %d is not positive", component_id, threshold)
        return []
    return [
        Throttle(
            component_id=component_id,
            inputs=tuple(inputs),
            threshold=threshold,
            key_field=key_field,
            window_secs=window_secs,
        )
    ]
