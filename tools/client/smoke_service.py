"""Client-style smoke test for an in-process contract-checked service.

- Builds a small Math service and drives it through DirectServiceMock
- Exercises: registration, accepted calls, rejected calls, introspection

Env vars:
- RPC_CONTRACTS_LOG_LEVEL (optional)
- RPC_CONTRACTS_TRACE_CALLS (optional)

Exit codes:
- 0: every call behaved as expected
- 1: error
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from rpc_contracts import ContractError, Service
from rpc_contracts.logging_setup import configure_logging
from rpc_contracts.testing import DirectServiceMock


def build_service() -> Service:
    service = Service("Math")
    service.rpc("add", params=["int", "int"], func=lambda a, b: a + b)
    service.rpc("opposite", params="boolean", func=lambda flag: not flag)
    return service


def main() -> int:
    configure_logging()
    service = build_service()
    mock = DirectServiceMock(service)

    expected_ok = [
        ("add", (12, 24), 36),
        ("opposite", (False,), True),
    ]
    expected_rejected = [
        ("add", ("as", "b")),
        ("add", (12.12, 24)),
        ("opposite", (0,)),
    ]

    failures = []
    results = []
    for method, args, want in expected_ok:
        got = getattr(mock, method)(*args)
        results.append({"method": service.qualified_name(method), "status": "ok", "result": got})
        if got != want:
            failures.append(f"{method}{args} returned {got!r}, expected {want!r}")

    for method, args in expected_rejected:
        try:
            getattr(mock, method)(*args)
        except ContractError as e:
            results.append({"method": service.qualified_name(method), "status": "rejected",
                            "error": e.to_detail().model_dump(exclude_none=True)})
        else:
            failures.append(f"{method}{args} was not rejected")

    print(json.dumps({
        "service": service.describe().model_dump(),
        "calls": results,
    }, indent=2))

    if failures:
        print(f"ERROR: {failures}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
