"""Presentation-layer privacy helpers for public search results."""

MASK = "***"
_VISIBLE_PREFIX = 2
_VISIBLE_SUFFIX = 4


def mask_serial_number(serial: str) -> str:
    """
    Hide the middle of a serial number: ``WTU123456`` -> ``WT***3456``.

    Serials of four characters or fewer are returned unchanged.
    """
    if len(serial) <= _VISIBLE_SUFFIX:
        return serial
    return serial[:_VISIBLE_PREFIX] + MASK + serial[-_VISIBLE_SUFFIX:]
