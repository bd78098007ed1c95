from __future__ import annotations

import re
import sys
from pathlib import Path

FORMATS = [
    "sbi",
    "standard_chartered",
    "generic",
]

FAIL_RE = re.compile(r"^=== FAIL: ([a-z_]+) ===\s*$")
PASS_RE = re.compile(r"^PASS ([a-z_]+) \(([^)]*)\) withdrawals=(\d+)\s*$")


def _md_escape(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", "<br>").strip()


def summarize(log_text: str) -> str:
    """Turn the fixture test's PASS / FAIL lines into a markdown table."""
    data: dict[str, dict[str, str]] = {
        fmt: {"status": "UNKNOWN", "message": "", "fixture": "", "parser": "", "withdrawals": ""}
        for fmt in FORMATS
    }
    current_fail: str | None = None

    for line in log_text.splitlines():
        fail_match = FAIL_RE.match(line)
        if fail_match:
            current_fail = fail_match.group(1)
            data.setdefault(current_fail, {"status": "", "message": "", "fixture": "", "parser": "", "withdrawals": ""})
            data[current_fail]["status"] = "FAIL"
            continue

        pass_match = PASS_RE.match(line)
        if pass_match:
            fmt, parser_path, count = pass_match.groups()
            item = data.setdefault(fmt, {"status": "", "message": "", "fixture": "", "parser": "", "withdrawals": ""})
            if item["status"] != "FAIL":
                item["status"] = "PASS"
            item["parser"] = item["parser"] or parser_path
            item["withdrawals"] = count
            current_fail = None
            continue

        if current_fail:
            item = data[current_fail]
            if line.startswith("pdf:") and not item["fixture"]:
                item["fixture"] = line.split(":", 1)[1].strip()
            elif line.startswith("withdrawals:") and not item["withdrawals"]:
                item["withdrawals"] = line.split(":", 1)[1].strip()
            elif line.startswith("message:") and not item["message"]:
                item["message"] = line.split(":", 1)[1].strip()
            elif line.startswith("=== FIXTURE TEXT"):
                current_fail = None

    passed = sum(1 for fmt in FORMATS if data[fmt]["status"] == "PASS")
    failed = sum(1 for fmt in FORMATS if data[fmt]["status"] == "FAIL")

    out = [
        "## Statement Fixtures Test Summary",
        "",
        f"**Totals:** passed={passed} failed={failed} total={len(FORMATS)}",
        "",
        "| Format | Status | Withdrawals | Message | Fixture | Parser |",
        "|---|---|---|---|---|---|",
    ]
    for fmt in FORMATS:
        item = data[fmt]
        cells = [fmt, item["status"], item["withdrawals"], item["message"], item["fixture"], item["parser"]]
        out.append("| " + " | ".join(_md_escape(c) for c in cells) + " |")

    return "\n".join(out) + "\n"


def main() -> int:
    if len(sys.argv) != 2:
        print("Usage: python scripts/ci_summarize_unittest.py <unittest.log>", file=sys.stderr)
        return 2

    log_path = Path(sys.argv[1])
    if not log_path.exists():
        print(f"Log file not found: {log_path}", file=sys.stderr)
        return 2

    print(summarize(log_path.read_text(encoding="utf-8", errors="replace")), end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
