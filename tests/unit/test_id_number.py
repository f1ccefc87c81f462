import pytest

from idscan.core.entities.id_number import (
    birth_date_from_id,
    checksum_digit,
    gender_from_id,
    has_valid_checksum,
    is_structurally_valid,
    region_code_from_id,
)

from tests.samples import SAMPLE_ID, VALID_ID


class TestStructuralValidity:

    @pytest.mark.parametrize("id_number", [
        SAMPLE_ID,
        VALID_ID,
        "440301200002290017",
        "110101199012310000",
    ])
    def test_valid_numbers(self, id_number):
        assert is_structurally_valid(id_number) is True

    @pytest.mark.parametrize("position", range(17))
    def test_non_digit_in_first_17_is_invalid(self, position):
        mutated = SAMPLE_ID[:position] + "A" + SAMPLE_ID[position + 1:]
        assert is_structurally_valid(mutated) is False

    def test_length_changes_are_invalid(self):
        assert is_structurally_valid(SAMPLE_ID[:-1]) is False
        assert is_structurally_valid(SAMPLE_ID + "1") is False
        assert is_structurally_valid("") is False

    def test_last_character(self):
        assert is_structurally_valid(SAMPLE_ID[:17] + "X") is True
        assert is_structurally_valid(SAMPLE_ID[:17] + "x") is False
        assert is_structurally_valid(SAMPLE_ID[:17] + "Y") is False

    def test_fullwidth_digits_rejected(self):
        assert is_structurally_valid("１" + SAMPLE_ID[1:]) is False

    @pytest.mark.parametrize("embedded", ["19901301", "19900001", "19900100", "19900132"])
    def test_implausible_embedded_date(self, embedded):
        id_number = "110101" + embedded + "1234"
        assert is_structurally_valid(id_number) is False

    def test_loose_calendar_check(self):
        # Day 31 in February passes; no calendar arithmetic
        assert is_structurally_valid("110101199002311234") is True

    def test_non_string(self):
        assert is_structurally_valid(None) is False


class TestDerivations:

    def test_birth_date(self):
        assert birth_date_from_id(SAMPLE_ID) == "1990-01-01"
        assert birth_date_from_id(VALID_ID) == "1949-12-31"
        assert birth_date_from_id("bad") is None

    def test_gender(self):
        assert gender_from_id(SAMPLE_ID) == "男"
        assert gender_from_id(VALID_ID) == "女"
        assert gender_from_id("bad") is None

    def test_region_code(self):
        assert region_code_from_id(VALID_ID) == "110105"
        assert region_code_from_id("bad") is None


class TestChecksum:

    def test_checksum_digit(self):
        assert checksum_digit(VALID_ID[:17]) == "X"
        assert checksum_digit(SAMPLE_ID[:17]) == "7"

    def test_has_valid_checksum(self):
        assert has_valid_checksum(VALID_ID) is True
        assert has_valid_checksum(SAMPLE_ID) is False
        assert has_valid_checksum(SAMPLE_ID[:17] + "7") is True
        assert has_valid_checksum("bad") is False
