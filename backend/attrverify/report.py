"""
Verification Report Generator.

Renders a VerificationResult as JSON or Markdown for the command line
and for batch front-ends that keep a record of rejected requests.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .models import BatchRequest, ParentObject
from .validator import VerificationResult


REPORT_VERSION = "attrverify-report/1.0"


@dataclass
class VerificationReport:
    """A verification result plus the request it was produced for."""

    report_version: str
    batch_request: BatchRequest
    parent_object: ParentObject
    result: VerificationResult
    generated_at: str
    duration_ms: int
    tool_version: str = __version__
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "report_version": self.report_version,
            "request": {
                "batch_request": self.batch_request.value,
                "parent_object": self.parent_object.value,
            },
            "verification": self.result.to_dict(),
            "metadata": {
                "generated_at": self.generated_at,
                "tool_version": self.tool_version,
                "duration_ms": self.duration_ms,
            },
        }
        if self.source:
            data["request"]["source"] = self.source
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_markdown(self) -> str:
        """Convert to Markdown format report."""
        lines = []
        result = self.result
        status = "ACCEPTED" if result.valid else "REJECTED"

        lines.append(f"# Attribute Verification: {self.batch_request.value}")
        lines.append("")
        lines.append(f"**Status:** {status}")
        lines.append(f"**Parent object:** {self.parent_object.value}")
        lines.append(f"**Attributes checked:** {result.checked}")
        lines.append("")

        if result.failure:
            lines.append("## Rejection")
            lines.append("")
            lines.append(f"- **Attribute:** `{result.failure.qualified_name}`")
            lines.append(f"- **Value:** `{result.failure.value}`")
            lines.append(f"- **Code:** {result.failure.code.value}")
            lines.append(f"- **Message:** {result.failure.message}")
            lines.append("")

        if result.attributes:
            lines.append("## Accepted Attributes")
            lines.append("")
            lines.append("| Attribute | Value | Rewritten |")
            lines.append("|-----------|-------|-----------|")
            for attr in result.attributes:
                rewritten = "yes" if attr.qualified_name in result.rewritten else ""
                lines.append(f"| {attr.qualified_name} | `{attr.value}` | {rewritten} |")
            lines.append("")

        lines.append("## Metadata")
        lines.append("")
        lines.append(f"- **Generated At:** {self.generated_at}")
        lines.append(f"- **Tool Version:** {self.tool_version}")
        lines.append(f"- **Duration:** {self.duration_ms}ms")
        if self.source:
            lines.append(f"- **Source:** {self.source}")
        lines.append("")

        return "\n".join(lines)

    def save(self, output_path: Path, format: str = "json") -> None:
        """
        Save report to file.

        Args:
            output_path: Path to save the report.
            format: Output format, either 'json' or 'markdown'.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if format == "markdown":
            output_path.write_text(self.to_markdown(), encoding="utf-8")
        else:
            output_path.write_text(self.to_json(), encoding="utf-8")


def generate_report(
    result: VerificationResult,
    duration_ms: int,
    source: Optional[Path] = None,
) -> VerificationReport:
    """
    Build a report for a verification result.

    Args:
        result: Result from VerifyEngine.
        duration_ms: Verification time in milliseconds.
        source: Request file, when the request was read from one.

    Returns:
        VerificationReport ready for serialization.
    """
    return VerificationReport(
        report_version=REPORT_VERSION,
        batch_request=result.batch_request or BatchRequest.QUEUE_JOB,
        parent_object=result.parent_object or ParentObject.JOB,
        result=result,
        generated_at=datetime.now(timezone.utc).isoformat(),
        duration_ms=duration_ms,
        source=str(source) if source else None,
    )


class ReportTimer:
    """Context manager for timing verification."""

    def __init__(self):
        self.start_time: float = 0
        self.duration_ms: int = 0

    def __enter__(self) -> "ReportTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.duration_ms = int((time.perf_counter() - self.start_time) * 1000)
