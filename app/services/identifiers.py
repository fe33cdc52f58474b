# app/services/identifiers.py
"""
Plate and matricula canonicalisation, the single definition of
"same identifier" used by storage, search and the typing helpers.

Plates follow the Puebla state format: 3 letters + 3-4 digits, stored as
LLL-NNNN. First letter must be T or U; I, Ñ, O and Q are never issued.
Matriculas are 9-digit student IDs.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

VALID_FIRST_LETTERS = frozenset("TU")
EXCLUDED_LETTERS = frozenset("IÑOQ")
VALID_LETTERS = frozenset("ABCDEFGHJKLMNPRSTUVWXYZ")

PLATE_MIN_LENGTH = 6
PLATE_MAX_LENGTH = 7
PLATE_LETTERS = 3
PLATE_MAX_DIGITS = 4
MATRICULA_LENGTH = 9

_NOT_PLATE_CHAR = re.compile(r"[^0-9A-ZÑ]")
_NOT_DIGIT = re.compile(r"[^0-9]")
_ASCII_LETTER = re.compile(r"[A-Z]")


class PlateError(str, Enum):
    EMPTY = "empty"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    BAD_FIRST_LETTER = "bad_first_letter"
    EXCLUDED_LETTER = "excluded_letter"
    INVALID_LETTER = "invalid_letter"
    NON_DIGIT_TAIL = "non_digit_tail"
    WRONG_DIGIT_COUNT = "wrong_digit_count"


class MatriculaError(str, Enum):
    EMPTY = "empty"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"


_MESSAGES = {
    PlateError.EMPTY: "Plate is required",
    PlateError.TOO_SHORT: "Plate is incomplete (minimum 6 characters)",
    PlateError.TOO_LONG: "Plate is too long (maximum 7 characters)",
    PlateError.BAD_FIRST_LETTER: "First letter must be T or U (Puebla)",
    PlateError.EXCLUDED_LETTER: "Letter {detail} is not allowed on plates (NOM-001-SCT-2-2016)",
    PlateError.INVALID_LETTER: "Character {detail} is not a valid plate letter",
    PlateError.NON_DIGIT_TAIL: "Plate must end in digits",
    PlateError.WRONG_DIGIT_COUNT: "Plate requires 3 or 4 digits",
    MatriculaError.EMPTY: "Matricula is required",
    MatriculaError.TOO_SHORT: "Matricula is incomplete ({detail}/9 digits)",
    MatriculaError.TOO_LONG: "Matricula is too long (maximum 9 digits)",
}


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: Optional[Enum] = None
    detail: Optional[str] = None    # offending letter, or current digit count

    @property
    def message(self) -> Optional[str]:
        if self.reason is None:
            return None
        return _MESSAGES[self.reason].format(detail=self.detail)


VALID = ValidationResult(valid=True)


def clean_identifier(raw: str) -> str:
    """Uppercase and drop everything but digits and plate letters."""
    return _NOT_PLATE_CHAR.sub("", (raw or "").upper())


def digits_only(raw: str) -> str:
    return _NOT_DIGIT.sub("", raw or "")


def is_valid_plate_letter(letter: str, position: int) -> bool:
    upper = letter.upper()
    if upper in EXCLUDED_LETTERS:
        return False
    if position == 0:
        return upper in VALID_FIRST_LETTERS
    return upper in VALID_LETTERS


# ── Plates ───────────────────────────────────────────────────────────────────

def normalize_plate(raw: str) -> str:
    """
    Canonical storage form: ``LLL-NNNN``.
    Inputs of 3 characters or fewer are returned cleaned but unsplit so the
    function can run on every keystroke. Idempotent.
    """
    clean = clean_identifier(raw)
    if len(clean) <= PLATE_LETTERS:
        return clean
    return f"{clean[:PLATE_LETTERS]}-{clean[PLATE_LETTERS:]}"


def format_plate_input(raw: str) -> str:
    """
    Strict as-you-type formatter. Letters that cannot appear at the next
    letter position are dropped, as are letters past the third and digits
    past the fourth.
    """
    letters = ""
    numbers = ""
    for char in clean_identifier(raw):
        if _ASCII_LETTER.fullmatch(char) and len(letters) < PLATE_LETTERS:
            if is_valid_plate_letter(char, len(letters)):
                letters += char
        elif char.isdigit() and len(numbers) < PLATE_MAX_DIGITS:
            numbers += char

    if not letters:
        return ""
    if not numbers:
        return letters
    return f"{letters}-{numbers}"


def validate_plate(plate: str) -> ValidationResult:
    clean = clean_identifier(plate)

    if not clean:
        return ValidationResult(False, PlateError.EMPTY)
    if len(clean) < PLATE_MIN_LENGTH:
        return ValidationResult(False, PlateError.TOO_SHORT)
    if len(clean) > PLATE_MAX_LENGTH:
        return ValidationResult(False, PlateError.TOO_LONG)

    letters, numbers = clean[:PLATE_LETTERS], clean[PLATE_LETTERS:]

    for position, letter in enumerate(letters):
        if letter in EXCLUDED_LETTERS:
            return ValidationResult(False, PlateError.EXCLUDED_LETTER, letter)
        if position == 0 and letter not in VALID_FIRST_LETTERS:
            return ValidationResult(False, PlateError.BAD_FIRST_LETTER, letter)
        if letter not in VALID_LETTERS:
            return ValidationResult(False, PlateError.INVALID_LETTER, letter)

    if not numbers.isdigit():
        return ValidationResult(False, PlateError.NON_DIGIT_TAIL)
    if not 3 <= len(numbers) <= PLATE_MAX_DIGITS:
        return ValidationResult(False, PlateError.WRONG_DIGIT_COUNT)

    return VALID


# ── Matriculas ───────────────────────────────────────────────────────────────

def normalize_matricula(raw: str) -> str:
    """Digits only, truncated to 9. Never zero-padded."""
    return digits_only(raw)[:MATRICULA_LENGTH]


def validate_matricula(matricula: str) -> ValidationResult:
    digits = digits_only(matricula)

    if not digits:
        return ValidationResult(False, MatriculaError.EMPTY)
    if len(digits) < MATRICULA_LENGTH:
        return ValidationResult(False, MatriculaError.TOO_SHORT, str(len(digits)))
    if len(digits) > MATRICULA_LENGTH:
        return ValidationResult(False, MatriculaError.TOO_LONG)

    return VALID
