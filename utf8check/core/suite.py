"""Built-in scenario suite exercising the validator end to end."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .checklog import CheckLog
from .dfa import ACCEPT
from .report import Tally
from .validator import is_valid_complete, is_valid_cstring, validate

JAPANESE = "こんにちは".encode("utf-8")
EMOJI = b"\xF0\x9F\x98\x80"
MIXED = "ASCII + 😀 + café + 你好".encode("utf-8")

Group = Callable[[Tally], None]


def _cstring_body(data: bytes) -> bytes:
    end = data.find(b"\x00")
    return data if end == -1 else data[:end]


def check_cstring(tally: Tally, label: str, data: bytes, expected: bool) -> None:
    tally.expect_valid(label, is_valid_cstring(data), expected, _cstring_body(data))


def check_length(tally: Tally, label: str, data: bytes, length: int, expected: bool) -> None:
    tally.expect_valid(label, is_valid_complete(data, length), expected, data[:length])


def check_stream(tally: Tally, label: str, chunk: bytes, state: int, expect_accept: bool) -> int:
    """Feed ``chunk`` from ``state``, check whether it ends in ACCEPT, return the new state."""
    state = validate(chunk, len(chunk), state)
    accepted = state == ACCEPT
    tally.record(
        label,
        accepted == expect_accept,
        expected="ACCEPT" if expect_accept else "NOT-ACCEPT",
        actual=f"{'ACCEPT' if accepted else 'NOT-ACCEPT'} (state={state})",
        data=chunk,
    )
    return state


def basic_valid(tally: Tally) -> None:
    check_cstring(tally, "ASCII valid", b"Hello, world!", True)
    check_cstring(tally, "Japanese valid", JAPANESE, True)
    check_cstring(tally, "Emoji valid", EMOJI, True)
    check_cstring(tally, "Mixed string valid", MIXED, True)


def basic_invalid(tally: Tally) -> None:
    check_cstring(tally, "Lone continuation invalid", b"\x80\x00", False)
    check_cstring(tally, "Overlong slash invalid", b"\xC0\xAF\x00", False)
    check_cstring(tally, "Truncated 2-byte invalid", b"\xC3\x00", False)
    check_cstring(tally, "Truncated 4-byte invalid", b"\xF0\x9F\x98\x00", False)
    check_cstring(tally, "Surrogate U+D800 invalid in UTF-8", b"\xED\xA0\x80\x00", False)
    check_cstring(tally, "Codepoint > U+10FFFF invalid", b"\xF4\x90\x80\x80\x00", False)


def partial_lengths(tally: Tally) -> None:
    check_length(tally, "Ja first 2 bytes (incomplete) invalid", JAPANESE, 2, False)
    check_length(tally, "Ja first 3 bytes (one char) valid", JAPANESE, 3, True)
    check_length(tally, "Ja full length valid", JAPANESE, len(JAPANESE), True)
    for length in range(1, 4):
        check_length(tally, f"Emoji {length} byte{'s' if length > 1 else ''} invalid", EMOJI, length, False)
    check_length(tally, "Emoji 4 bytes valid", EMOJI, 4, True)


def streaming(tally: Tally) -> None:
    state = check_stream(tally, "Streaming chunk1 end ACCEPT", b"ASCII + ", ACCEPT, True)
    check_stream(tally, "Streaming chunk2 end ACCEPT", EMOJI + " café".encode("utf-8"), state, True)

    state = check_stream(tally, "Streaming split emoji part1 non-ACCEPT", EMOJI[:2], ACCEPT, False)
    check_stream(tally, "Streaming split emoji part2 ACCEPT", EMOJI[2:], state, True)


def demo_failure(tally: Tally) -> None:
    check_cstring(tally, "DEMO_FAIL: expect invalid but string is valid", "OK ✓".encode("utf-8"), False)


GROUPS: List[Group] = [basic_valid, basic_invalid, partial_lengths, streaming]


class SuiteRunner:
    """Run the scenario groups, print the report and optionally write artifacts."""

    def __init__(
        self,
        artifacts_path: Optional[Path] = None,
        include_demo_failure: bool = False,
        color: bool = False,
        log: Optional[CheckLog] = None,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.artifacts_path = artifacts_path
        self.include_demo_failure = include_demo_failure
        self.color = color
        self.log = log or CheckLog()
        self.echo = echo

    def groups(self) -> List[Group]:
        groups = list(GROUPS)
        if self.include_demo_failure:
            groups.append(demo_failure)
        return groups

    def run(self) -> Tally:
        tally = Tally()
        self.log.log("selftest start")
        for group in self.groups():
            seen = len(tally.results)
            group(tally)
            for result in tally.results[seen:]:
                for line in result.format(color=self.color):
                    self.echo(line)
                if not result.passed:
                    self.log.log(f"FAIL {result.label}")
        for line in tally.summary_lines():
            self.echo(line)
        self.log.log(f"selftest done passed={tally.passed} failed={tally.failed}")

        if self.artifacts_path is not None:
            self._write_artifacts(tally)
        return tally

    def _write_artifacts(self, tally: Tally) -> None:
        self.artifacts_path.mkdir(parents=True, exist_ok=True)
        payload: Dict[str, object] = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "passed": tally.passed,
            "failed": tally.failed,
            "checks": [result.to_dict() for result in tally.results],
        }
        with (self.artifacts_path / "selftest_results.json").open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)

        with (self.artifacts_path / "selftest_results.md").open("w", encoding="utf-8") as handle:
            handle.write("# Self-test Results\n\n")
            handle.write(f"Generated: {payload['generated_at']}\n\n")
            handle.write(f"- passed: {tally.passed}\n")
            handle.write(f"- failed: {tally.failed}\n\n")
            for result in tally.results:
                mark = "x" if result.passed else " "
                handle.write(f"- [{mark}] {result.label}\n")
