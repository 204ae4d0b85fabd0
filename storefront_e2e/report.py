from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path

PASSED = "PASSED"
FAILED = "FAILED"
INCONCLUSIVE = "INCONCLUSIVE"


@dataclass
class ScenarioResult:
    name: str
    status: str  # PASSED, FAILED, INCONCLUSIVE
    detail: str | None = None
    duration_s: float = 0.0


@dataclass
class RunReport:
    timestamp: str
    total: int
    passed: int
    failed: int
    inconclusive: int
    results: list[ScenarioResult]

    def summary_text(self) -> str:
        lines = [
            f"Run: {self.timestamp}",
            f"Total: {self.total}  Passed: {self.passed}  Failed: {self.failed}  "
            f"Inconclusive: {self.inconclusive}",
            "",
        ]
        for i, r in enumerate(self.results, 1):
            lines.append(f"  {i}. [{r.status}] {r.name}  ({r.duration_s:.1f}s)")
            if r.detail:
                for dl in r.detail.splitlines():
                    lines.append(f"     {dl}")
        return "\n".join(lines)

    def write_json(self, path: str = "artifacts/run_report.json") -> str:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(asdict(self), indent=2))
        return str(out)

    def exit_code(self) -> int:
        return 1 if self.failed else 0


def build_report(results: list[ScenarioResult]) -> RunReport:
    return RunReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        total=len(results),
        passed=sum(1 for r in results if r.status == PASSED),
        failed=sum(1 for r in results if r.status == FAILED),
        inconclusive=sum(1 for r in results if r.status == INCONCLUSIVE),
        results=results,
    )
