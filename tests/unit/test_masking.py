"""Unit tests for serial-number masking."""

import pytest

from rideback.search.masking import mask_serial_number


class TestMaskSerialNumber:
    def test_masks_middle(self):
        assert mask_serial_number("WTU123456") == "WT***3456"

    def test_five_chars_keeps_overlap(self):
        # prefix(2) + suffix(4) overlap by one character
        assert mask_serial_number("ABCDE") == "AB***BCDE"

    @pytest.mark.parametrize("serial", ["", "A", "AB12", "1234"])
    def test_short_serial_unchanged(self, serial: str):
        assert mask_serial_number(serial) == serial

    def test_short_serial_idempotent(self):
        once = mask_serial_number("XY12")
        assert mask_serial_number(once) == once

    def test_long_serial(self):
        serial = "SN-2023-000987654"
        masked = mask_serial_number(serial)
        assert masked.startswith("SN***")
        assert masked.endswith("7654")
        assert len(masked) == 2 + 3 + 4
