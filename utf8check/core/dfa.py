"""Byte-class DFA recognising well-formed UTF-8 (RFC 3629, section 4).

The automaton never decodes a codepoint. Overlong forms, surrogates and
values above U+10FFFF are excluded by restricting the byte range allowed
directly after the E0, ED, F0 and F4 lead bytes.
"""

from typing import Dict, Tuple

# Public states. Every other value is a private mid-character state.
ACCEPT = 0
REJECT = 1

TAIL1 = 2  # one more 80..BF
TAIL2 = 3  # two more 80..BF
TAIL2_E0 = 4  # A0..BF, then TAIL1
TAIL2_ED = 5  # 80..9F, then TAIL1
TAIL3 = 6  # three more 80..BF
TAIL3_F0 = 7  # 90..BF, then TAIL2
TAIL3_F4 = 8  # 80..8F, then TAIL2

STATE_COUNT = 9

# Byte classes.
ASCII = 0
CONT_80_8F = 1
CONT_90_9F = 2
CONT_A0_BF = 3
LEAD2 = 4
LEAD3_E0 = 5
LEAD3 = 6
LEAD3_ED = 7
LEAD4_F0 = 8
LEAD4 = 9
LEAD4_F4 = 10
INVALID = 11

CLASS_COUNT = 12

CLASS_RANGES: Dict[int, Tuple[Tuple[int, int], ...]] = {
    ASCII: ((0x00, 0x7F),),
    CONT_80_8F: ((0x80, 0x8F),),
    CONT_90_9F: ((0x90, 0x9F),),
    CONT_A0_BF: ((0xA0, 0xBF),),
    LEAD2: ((0xC2, 0xDF),),
    LEAD3_E0: ((0xE0, 0xE0),),
    LEAD3: ((0xE1, 0xEC), (0xEE, 0xEF)),
    LEAD3_ED: ((0xED, 0xED),),
    LEAD4_F0: ((0xF0, 0xF0),),
    LEAD4: ((0xF1, 0xF3),),
    LEAD4_F4: ((0xF4, 0xF4),),
    INVALID: ((0xC0, 0xC1), (0xF5, 0xFF)),
}

_ANY_CONT = (CONT_80_8F, CONT_90_9F, CONT_A0_BF)

# Legal moves only; any (state, class) pair missing here goes to REJECT.
GRAMMAR: Dict[int, Dict[int, int]] = {
    ACCEPT: {
        ASCII: ACCEPT,
        LEAD2: TAIL1,
        LEAD3_E0: TAIL2_E0,
        LEAD3: TAIL2,
        LEAD3_ED: TAIL2_ED,
        LEAD4_F0: TAIL3_F0,
        LEAD4: TAIL3,
        LEAD4_F4: TAIL3_F4,
    },
    TAIL1: {cls: ACCEPT for cls in _ANY_CONT},
    TAIL2: {cls: TAIL1 for cls in _ANY_CONT},
    TAIL2_E0: {CONT_A0_BF: TAIL1},
    TAIL2_ED: {CONT_80_8F: TAIL1, CONT_90_9F: TAIL1},
    TAIL3: {cls: TAIL2 for cls in _ANY_CONT},
    TAIL3_F0: {CONT_90_9F: TAIL2, CONT_A0_BF: TAIL2},
    TAIL3_F4: {CONT_80_8F: TAIL2},
}

# Continuation bytes still owed before the character is complete.
PENDING: Dict[int, int] = {
    ACCEPT: 0,
    REJECT: 0,
    TAIL1: 1,
    TAIL2: 2,
    TAIL2_E0: 2,
    TAIL2_ED: 2,
    TAIL3: 3,
    TAIL3_F0: 3,
    TAIL3_F4: 3,
}


def _build_classes() -> bytes:
    table = [-1] * 256
    for cls, ranges in CLASS_RANGES.items():
        for low, high in ranges:
            for byte in range(low, high + 1):
                if table[byte] != -1:
                    raise ValueError(f"byte 0x{byte:02X} assigned to two classes")
                table[byte] = cls
    missing = [byte for byte, cls in enumerate(table) if cls == -1]
    if missing:
        raise ValueError(f"unclassified bytes: {', '.join(f'0x{b:02X}' for b in missing)}")
    return bytes(table)


def _build_transitions() -> bytes:
    table = [REJECT] * (STATE_COUNT * CLASS_COUNT)
    for state, moves in GRAMMAR.items():
        for cls, target in moves.items():
            table[state * CLASS_COUNT + cls] = target
    return bytes(table)


BYTE_CLASSES = _build_classes()
TRANSITIONS = _build_transitions()


def step(state: int, byte: int) -> int:
    """Return the state reached from ``state`` after consuming ``byte``."""
    return TRANSITIONS[state * CLASS_COUNT + BYTE_CLASSES[byte]]


def pending(state: int) -> int:
    """Return how many continuation bytes ``state`` is still waiting for."""
    return PENDING[state]
