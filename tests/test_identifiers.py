# tests/test_identifiers.py
"""Unit tests for plate / matricula normalization and validation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import re
import pytest
from app.services.identifiers import (
    MatriculaError,
    PlateError,
    format_plate_input,
    normalize_matricula,
    normalize_plate,
    validate_matricula,
    validate_plate,
)

SAMPLES = ["", "t", "tn", "tna", "tna1", "TNA1234", "tna-1234", " T N A 1 2 3 4 ", "TNA-1234",
           "ABC--12-34", "12345", "ñoq-12", "UXY 987", "TNA12345678", "%%%", "202161606"]


class TestNormalizePlate:
    def test_canonical_form(self):
        assert normalize_plate("tna1234") == "TNA-1234"
        assert normalize_plate("TNA 123") == "TNA-123"
        assert normalize_plate("t.n.a-1-2-3-4") == "TNA-1234"

    def test_partial_input_left_unsplit(self):
        assert normalize_plate("tn") == "TN"
        assert normalize_plate("TNA") == "TNA"
        assert normalize_plate("TNA1") == "TNA-1"

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_idempotent(self, raw):
        once = normalize_plate(raw)
        assert normalize_plate(once) == once

    @pytest.mark.parametrize("raw", ["TNA1234", "tna-123", "UXY 9876", "TZZ-001"])
    def test_valid_plates_match_canonical_pattern(self, raw):
        assert validate_plate(raw).valid
        plate = normalize_plate(raw)
        assert re.fullmatch(r"[TU][A-Z]{2}-\d{3,4}", plate)
        assert not set(plate[:3]) & set("IÑOQ")


class TestFormatPlateInput:
    def test_formats_complete_plate(self):
        assert format_plate_input("tna1234") == "TNA-1234"

    def test_letters_only(self):
        assert format_plate_input("tn") == "TN"

    def test_rejects_bad_first_letter(self):
        # A is not valid in position 0, so it is dropped and N becomes a candidate for position 0
        assert format_plate_input("A") == ""
        assert format_plate_input("ATNA") == "TNA"

    def test_drops_excluded_letters_anywhere(self):
        assert format_plate_input("TIOQNA12") == "TNA-12"

    def test_caps_letters_and_digits(self):
        assert format_plate_input("TNAB123456") == "TNA-1234"

    def test_digits_without_letters(self):
        assert format_plate_input("1234") == ""


class TestValidatePlate:
    @pytest.mark.parametrize("raw,reason", [
        ("", PlateError.EMPTY),
        ("--", PlateError.EMPTY),
        ("TNA12", PlateError.TOO_SHORT),
        ("TNA12345", PlateError.TOO_LONG),
        ("ANA-123", PlateError.BAD_FIRST_LETTER),
        ("TNO-123", PlateError.EXCLUDED_LETTER),
        ("T1A-123", PlateError.INVALID_LETTER),
        ("TNA12B", PlateError.NON_DIGIT_TAIL),
        ("TNAB123", PlateError.NON_DIGIT_TAIL),
    ])
    def test_reason_codes(self, raw, reason):
        result = validate_plate(raw)
        assert not result.valid
        assert result.reason == reason
        assert result.message

    def test_excluded_first_letter_reports_the_letter(self):
        result = validate_plate("IOA-123")
        assert not result.valid
        assert result.reason == PlateError.EXCLUDED_LETTER
        assert result.detail == "I"
        assert "I" in result.message

    def test_enye_is_excluded(self):
        result = validate_plate("TÑA-123")
        assert result.reason == PlateError.EXCLUDED_LETTER
        assert result.detail == "Ñ"

    def test_valid(self):
        result = validate_plate("TNA-1234")
        assert result.valid
        assert result.reason is None
        assert result.message is None


class TestMatricula:
    def test_normalize_strips_and_truncates(self):
        assert normalize_matricula("2021-6160-6") == "202161606"
        assert normalize_matricula("2021616061234") == "202161606"
        assert normalize_matricula("abc") == ""

    def test_normalize_does_not_pad(self):
        assert normalize_matricula("123") == "123"

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_normalized_is_short_and_numeric(self, raw):
        m = normalize_matricula(raw)
        assert len(m) <= 9
        assert m == "" or m.isdigit()

    def test_validate(self):
        assert validate_matricula("202161606").valid
        assert validate_matricula("2021-616-06").valid

        empty = validate_matricula("  ")
        assert empty.reason == MatriculaError.EMPTY

        short = validate_matricula("2021")
        assert short.reason == MatriculaError.TOO_SHORT
        assert "4/9" in short.message

        assert validate_matricula("2021616061").reason == MatriculaError.TOO_LONG
