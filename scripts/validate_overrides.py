#!/usr/bin/env python3
"""Check the anti-nuke override file and print problems. Exits 1 on errors."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

load_dotenv()

from warden.core.config import get_config
from warden.services.antinuke import OverrideStore, validate_overrides


def main() -> int:
    path = sys.argv[1] if len(sys.argv) > 1 else get_config().overrides_path
    store = OverrideStore(path)

    if not store.path.exists():
        print(f"No override file at {path}; built-in weights apply.")
        return 0

    raw = store.raw()
    if raw is None:
        print(f"ERROR {path}: not a readable JSON object")
        return 1

    report = validate_overrides(raw)
    for problem in report.errors:
        print(f"ERROR   {problem}")
    for problem in report.warnings:
        print(f"WARNING {problem}")

    print(f"{path}: {len(report.errors)} error(s), {len(report.warnings)} warning(s)")
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
