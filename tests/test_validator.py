# Behavioural tests for the UTF-8 validator entry points.
# Run: pytest -q

import codecs

import pytest

from utf8check.core import (
    ACCEPT,
    REJECT,
    StreamValidator,
    classify,
    is_incomplete,
    is_valid_complete,
    is_valid_cstring,
    pending,
    step,
    validate,
)
from utf8check.core import dfa

JAPANESE = "こんにちは".encode("utf-8")
EMOJI = b"\xF0\x9F\x98\x80"

SAMPLES = [
    b"",
    b"Hello, world!",
    JAPANESE,
    EMOJI,
    "ASCII + 😀 + café + 你好".encode("utf-8"),
    b"a\x80b",
    b"\xC0\xAF",
    b"\xED\xA0\x80",
    b"\xF4\x90\x80\x80",
    b"\xE2\x82",
    b"ok \xF0\x9F\x98",
]


def test_ascii_valid():
    assert is_valid_complete(b"Hello, world!")
    assert is_valid_cstring(b"Hello, world!")


def test_empty_input():
    assert validate(b"", 0, ACCEPT) == ACCEPT
    assert is_valid_complete(b"", 0)
    assert is_valid_cstring(b"")


def test_japanese_prefixes():
    assert is_valid_complete(JAPANESE)
    assert not is_valid_complete(JAPANESE, 2)
    assert is_valid_complete(JAPANESE, 3)


def test_emoji_lengths():
    for length in (1, 2, 3):
        assert not is_valid_complete(EMOJI, length)
        state = validate(EMOJI, length)
        assert state not in (ACCEPT, REJECT)
        assert is_incomplete(state)
        assert pending(state) == 4 - length
    assert is_valid_complete(EMOJI, 4)


@pytest.mark.parametrize(
    "data",
    [
        b"\x80\x00",  # lone continuation
        b"\xC0\xAF\x00",  # overlong slash
        b"\xC3\x00",  # truncated 2-byte
        b"\xF0\x9F\x98\x00",  # truncated 4-byte
        b"\xED\xA0\x80\x00",  # U+D800
        b"\xF4\x90\x80\x80\x00",  # above U+10FFFF
    ],
)
def test_invalid_cstrings(data):
    assert is_valid_cstring(data) is False


def test_cstring_stops_at_terminator():
    assert is_valid_cstring(b"abc\x00\xFF\xFF")
    assert not is_valid_complete(b"abc\x00\xFF\xFF")


def test_embedded_nul_is_content_with_explicit_length():
    data = b"a\x00b"
    assert is_valid_complete(data, len(data))
    assert validate(b"\xC3\x00") == REJECT


def test_overlong_and_range_leads():
    assert validate(b"\xE0\x80") == REJECT
    assert validate(b"\xE0\x9F") == REJECT
    assert is_incomplete(validate(b"\xE0\xA0"))
    assert validate(b"\xF0\x8F") == REJECT
    assert is_incomplete(validate(b"\xF0\x90"))
    assert validate(b"\xF4\x90") == REJECT
    assert is_incomplete(validate(b"\xF4\x8F"))
    assert is_valid_complete(b"\xF4\x8F\xBF\xBF")
    assert is_valid_complete(b"\xED\x9F\xBF")
    for lead in (0xC0, 0xC1, 0xF5, 0xF8, 0xFF):
        assert validate(bytes([lead])) == REJECT


def test_restriction_applies_to_first_continuation_only():
    # After E0 A0 the last byte may be anything in 80..BF.
    assert is_valid_complete(b"\xE0\xA0\x80")
    assert is_valid_complete(b"\xED\x80\xBF")
    assert is_valid_complete(b"\xF0\x90\x80\x80")


def test_ascii_mid_character_rejects():
    assert validate(b"\xE2\x82A") == REJECT


def test_streaming_split_emoji():
    state = validate(b"\xF0\x9F", 2, ACCEPT)
    assert state not in (ACCEPT, REJECT)
    state = validate(b"\x98\x80", 2, state)
    assert state == ACCEPT


def test_streaming_chunks_with_ascii_prefix():
    state = validate(b"ASCII + ")
    assert state == ACCEPT
    state = validate(EMOJI + " café".encode("utf-8"), state=state)
    assert state == ACCEPT


@pytest.mark.parametrize("data", SAMPLES)
def test_every_split_point_matches_single_pass(data):
    whole = validate(data, len(data), ACCEPT)
    for cut in range(len(data) + 1):
        first = validate(data[:cut], cut, ACCEPT)
        assert validate(data[cut:], len(data) - cut, first) == whole


def test_reject_is_absorbing():
    for byte in range(256):
        assert step(REJECT, byte) == REJECT
    assert validate(b"hello \xC3\xA9", state=REJECT) == REJECT


def test_transition_table_is_total():
    assert len(dfa.BYTE_CLASSES) == 256
    assert len(dfa.TRANSITIONS) == dfa.STATE_COUNT * dfa.CLASS_COUNT
    assert all(cls < dfa.CLASS_COUNT for cls in dfa.BYTE_CLASSES)
    assert all(state < dfa.STATE_COUNT for state in dfa.TRANSITIONS)


def test_mid_character_states_reject_ascii_and_leads():
    for state in range(2, dfa.STATE_COUNT):
        for byte in list(range(0x80)) + list(range(0xC0, 0x100)):
            assert step(state, byte) == REJECT


def test_every_one_and_two_byte_sequence_matches_codec():
    for first in range(256):
        for second in [None] + list(range(256)):
            data = bytes([first]) if second is None else bytes([first, second])
            try:
                data.decode("utf-8")
                complete = True
            except UnicodeDecodeError:
                complete = False
            try:
                codecs.getincrementaldecoder("utf-8")().decode(data, final=False)
                prefix = True
            except UnicodeDecodeError:
                prefix = False
            # CPython only flags ED A0..BF once the third byte arrives; every
            # completion of it is a surrogate.
            if first == 0xED and second is not None and 0xA0 <= second <= 0xBF:
                prefix = False
            state = validate(data)
            assert (state == ACCEPT) == complete, data
            assert (state != REJECT) == prefix, data


def test_encoded_codepoints_accepted():
    boundaries = [0, 0x7F, 0x80, 0x7FF, 0x800, 0xD7FF, 0xE000, 0xFFFD, 0xFFFF, 0x10000, 0x10FFFF]
    for cp in list(range(0, 0x110000, 97)) + boundaries:
        if 0xD800 <= cp <= 0xDFFF:
            continue
        assert is_valid_complete(chr(cp).encode("utf-8")), hex(cp)


def test_encoded_surrogates_rejected():
    for cp in (0xD800, 0xDBFF, 0xDC00, 0xDFFF):
        assert validate(chr(cp).encode("utf-8", "surrogatepass")) == REJECT


def test_surrogate_lead_rejected_at_second_byte():
    assert validate(b"\xED\xA0") == REJECT
    assert validate(b"\xED\xBF") == REJECT
    assert is_incomplete(validate(b"\xED\x9F"))
    stream = StreamValidator()
    stream.feed(b"x\xED")
    stream.feed(b"\xA0")
    assert stream.rejected
    assert stream.error_offset == 2


def test_bytes_like_inputs():
    assert is_valid_complete(bytearray(JAPANESE))
    assert is_valid_complete(memoryview(EMOJI))
    assert is_valid_cstring(bytearray(b"hi\x00\x80"))


def test_argument_errors():
    with pytest.raises(ValueError):
        validate(b"abc", 4)
    with pytest.raises(ValueError):
        validate(b"abc", -1)
    with pytest.raises(ValueError):
        validate(b"abc", state=42)
    with pytest.raises(ValueError):
        validate(b"a", state=True)
    with pytest.raises(TypeError):
        validate("abc")


def test_stream_validator_rejects_unknown_state():
    with pytest.raises(ValueError):
        StreamValidator(state=42)
    with pytest.raises(ValueError):
        StreamValidator(state=False)


def test_cstring_terminator_in_bytes_like_inputs():
    assert is_valid_cstring(memoryview(b"\xC3\xA9\x00\xFF"))
    assert not is_valid_cstring(bytearray(b"\xC3\x00\xA9"))
    assert not is_valid_cstring(b"\xC3")


def test_classify():
    assert classify(ACCEPT) == "accept"
    assert classify(REJECT) == "reject"
    assert classify(validate(b"\xC3")) == "incomplete"


def test_stream_validator_tracks_offsets():
    stream = StreamValidator()
    stream.feed(b"ab\xF0\x9F")
    assert not stream.complete and not stream.rejected
    assert stream.pending == 2
    stream.feed(b"\x98\x80c")
    assert stream.complete
    stream.feed(b"d\xFFe")
    assert stream.rejected
    assert stream.error_offset == 8
    stream.feed(b"more")
    assert stream.rejected
    assert stream.consumed == 14
    stream.reset()
    assert stream.state == ACCEPT and stream.error_offset is None
