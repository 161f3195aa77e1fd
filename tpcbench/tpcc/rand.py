"""Random data generators defined by the TPC-C specification."""

from __future__ import annotations

import random

CHARACTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"
LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUMBERS = "1234567890"
ORIGINAL_STRING = "ORIGINAL"

C_LAST_TOKENS = ("BAR", "OUGHT", "ABLE", "PRI", "PRES",
                 "ESE", "ANTI", "CALLY", "ATION", "EING")

_seed_rng = random.Random()
C_LOAD = _seed_rng.randrange(256)
C_ITEM_ID = _seed_rng.randrange(1024)
C_CUSTOMER_ID = _seed_rng.randrange(8192)


def rand_int(r: random.Random, low: int, high: int) -> int:
    """Return a random int in ``[low, high]``."""
    if low == high:
        return low
    return r.randrange(high - low + 1) + low


def _rand_string(r: random.Random, source: str, low: int, high: int) -> str:
    n = rand_int(r, low, high)
    return "".join(source[r.randrange(len(source))] for _ in range(n))


def rand_chars(r: random.Random, low: int, high: int) -> str:
    return _rand_string(r, CHARACTERS, low, high)


def rand_letters(r: random.Random, low: int, high: int) -> str:
    return _rand_string(r, LETTERS, low, high)


def rand_numbers(r: random.Random, low: int, high: int) -> str:
    return _rand_string(r, NUMBERS, low, high)


def rand_zip(r: random.Random) -> str:
    """Four random digits followed by ``11111``."""
    return _rand_string(r, NUMBERS, 9, 9)[:4] + "11111"


def rand_state(r: random.Random) -> str:
    return _rand_string(r, LETTERS, 2, 2)


def rand_tax(r: random.Random) -> float:
    return rand_int(r, 0, 2000) / 10000.0


def rand_original_string(r: random.Random) -> str:
    """A 26..50 char string; 10% of the time containing ``ORIGINAL``."""
    if r.randrange(10) == 0:
        s = _rand_string(r, CHARACTERS, 26, 50)
        index = r.randrange(len(s) - 8)
        return s[:index] + ORIGINAL_STRING + s[index + 8:]
    return rand_chars(r, 26, 50)


def rand_c_last_syllables(n: int) -> str:
    return C_LAST_TOKENS[n // 100] + C_LAST_TOKENS[n % 100 // 10] + C_LAST_TOKENS[n % 10]


def rand_c_last(r: random.Random) -> str:
    return rand_c_last_syllables(((r.randrange(256) | r.randrange(1000)) + C_LOAD) % 1000)


def rand_customer_id(r: random.Random) -> int:
    return ((r.randrange(1024) | (r.randrange(3000) + 1)) + C_CUSTOMER_ID) % 3000 + 1


def rand_item_id(r: random.Random) -> int:
    return ((r.randrange(8190) | (r.randrange(100000) + 1)) + C_ITEM_ID) % 100000 + 1