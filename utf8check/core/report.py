"""Labelled checks with a pass/fail tally and byte-level failure details."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .dfa import ACCEPT
from .validator import BytesLike, validate

COLOR_RESET = "\033[0m"
COLOR_RED = "\033[31m"
COLOR_GREEN = "\033[32m"


def hex_dump(data: BytesLike, width: int = 16) -> List[str]:
    """Render bytes as a ``bytes(N):`` header followed by rows of hex pairs."""
    raw = bytes(data)
    lines = [f"  bytes({len(raw)}):"]
    for offset in range(0, len(raw), width):
        row = raw[offset:offset + width]
        lines.append("   " + "".join(f" {byte:02X}" for byte in row))
    return lines


def end_state_line(data: BytesLike) -> str:
    """Describe the state a fresh stream ends in after ``data``."""
    state = validate(data)
    verdict = "ACCEPT" if state == ACCEPT else "NOT-ACCEPT"
    return f"  end_state={state} ({verdict})"


@dataclass
class CheckResult:
    label: str
    passed: bool
    expected: str
    actual: str
    details: List[str] = field(default_factory=list)

    def format(self, color: bool = False) -> List[str]:
        tag = "[PASS]" if self.passed else "[FAIL]"
        if color:
            tag = f"{COLOR_GREEN if self.passed else COLOR_RED}{tag}{COLOR_RESET}"
        lines = [f"{tag} {self.label}"]
        if not self.passed:
            lines.append(f"  expected: {self.expected}")
            lines.append(f"  actual  : {self.actual}")
            lines.extend(self.details)
        return lines

    def to_dict(self) -> Dict[str, object]:
        return {
            "label": self.label,
            "passed": self.passed,
            "expected": self.expected,
            "actual": self.actual,
            "details": list(self.details),
        }


@dataclass
class Tally:
    """Accumulate check results for one run; failures never stop the run."""

    results: List[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if not result.passed)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def record(
        self,
        label: str,
        passed: bool,
        expected: str,
        actual: str,
        data: Optional[BytesLike] = None,
    ) -> CheckResult:
        details: List[str] = []
        if not passed and data is not None:
            details.extend(hex_dump(data))
            details.append(end_state_line(data))
        result = CheckResult(label, passed, expected, actual, details)
        self.results.append(result)
        return result

    def expect_valid(self, label: str, actual: bool, expected: bool, data: BytesLike) -> CheckResult:
        """Compare a validity verdict, attaching a dump of ``data`` on mismatch."""
        return self.record(
            label,
            actual == expected,
            expected="VALID" if expected else "INVALID",
            actual="VALID" if actual else "INVALID",
            data=data,
        )

    def summary_lines(self) -> List[str]:
        lines = [
            "",
            "===== TEST SUMMARY =====",
            f"  Passed: {self.passed}",
            f"  Failed: {self.failed}",
        ]
        lines.append("Some tests FAILED." if self.failed else "All tests PASSED.")
        return lines
