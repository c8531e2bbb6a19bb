"""Whole-buffer and streaming entry points over the UTF-8 DFA."""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from .dfa import ACCEPT, REJECT, STATE_COUNT, pending, step

BytesLike = Union[bytes, bytearray, memoryview]
StateKind = Literal["accept", "incomplete", "reject"]


def _view(buffer: BytesLike) -> memoryview:
    view = memoryview(buffer)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _check_state(state: int) -> None:
    if isinstance(state, bool) or not isinstance(state, int) or not 0 <= state < STATE_COUNT:
        raise ValueError(f"Unknown validator state: {state!r}")


def _resolve_length(view: memoryview, length: Optional[int]) -> int:
    if length is None:
        return len(view)
    if length < 0:
        raise ValueError(f"Length must not be negative: {length}")
    if length > len(view):
        raise ValueError(f"Length {length} exceeds buffer size {len(view)}")
    return length


def _scan(view: memoryview, length: int, state: int) -> Tuple[int, int]:
    """Run the DFA and return ``(state, bytes_consumed)``.

    Scanning stops on the byte that drives the state to REJECT; that byte
    counts as consumed.
    """
    consumed = 0
    for byte in view[:length]:
        state = step(state, byte)
        consumed += 1
        if state == REJECT:
            break
    return state, consumed


def validate(buffer: BytesLike, length: Optional[int] = None, state: int = ACCEPT) -> int:
    """Advance ``state`` over the first ``length`` bytes of ``buffer``.

    ``length`` defaults to the whole buffer. Feed the returned state back in
    with the next chunk to validate a stream piece by piece; splitting the
    input at any point yields the same final state as a single call.
    """
    _check_state(state)
    view = _view(buffer)
    final, _ = _scan(view, _resolve_length(view, length), state)
    return final


def is_valid_complete(buffer: BytesLike, length: Optional[int] = None) -> bool:
    """Return True if the bytes are valid UTF-8 ending on a character boundary."""
    return validate(buffer, length, ACCEPT) == ACCEPT


def is_valid_cstring(buffer: BytesLike) -> bool:
    """Validate the bytes preceding the first NUL (the whole buffer if none)."""
    view = _view(buffer)
    end = view.tobytes().find(b"\x00")
    return is_valid_complete(view, len(view) if end == -1 else end)


def classify(state: int) -> StateKind:
    _check_state(state)
    if state == ACCEPT:
        return "accept"
    if state == REJECT:
        return "reject"
    return "incomplete"


def is_incomplete(state: int) -> bool:
    """True for a valid prefix that ends inside a multi-byte character."""
    return classify(state) == "incomplete"


@dataclass
class StreamValidator:
    """Hold the validation state of one byte stream between chunks."""

    state: int = ACCEPT
    consumed: int = 0
    error_offset: Optional[int] = None

    def __post_init__(self) -> None:
        _check_state(self.state)

    def feed(self, chunk: BytesLike) -> int:
        """Validate the next chunk and return the accumulated state."""
        view = _view(chunk)
        if self.state == REJECT:
            self.consumed += len(view)
            return self.state
        self.state, scanned = _scan(view, len(view), self.state)
        if self.state == REJECT:
            self.error_offset = self.consumed + scanned - 1
        self.consumed += len(view)
        return self.state

    @property
    def complete(self) -> bool:
        return self.state == ACCEPT

    @property
    def rejected(self) -> bool:
        return self.state == REJECT

    @property
    def pending(self) -> int:
        return pending(self.state)

    def reset(self) -> None:
        self.state = ACCEPT
        self.consumed = 0
        self.error_offset = None
