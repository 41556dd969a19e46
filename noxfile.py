"""Nox sessions orchestrating the fleet tenancy unit suites."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import nox


PYTHON_VERSIONS = ["3.11"]
PROJECT_ROOT = Path(__file__).parent

nox.options.sessions = [
    "tests(unit_core)",
    "tests(unit_api)",
    "tests(unit_logging)",
]


def _normalize_pythonpath(existing: str | None) -> str:
    parts = [str(PROJECT_ROOT)]
    if existing:
        parts.append(existing)
    return ":".join(part for part in parts if part)


def _run_suite(session: nox.Session, suite: str, targets: Iterable[str]) -> None:
    session.install("-e", ".[test]")

    env = dict(session.env)
    env["PYTHONPATH"] = _normalize_pythonpath(env.get("PYTHONPATH"))
    env["COVERAGE_FILE"] = str(PROJECT_ROOT / f".coverage.{suite}")

    session.log("Running %s suite: %s", suite, " ".join(targets))
    session.run(
        "coverage", "run", f"--context={suite}", "-m", "pytest", *targets, *session.posargs,
        env=env,
    )
    session.run("coverage", "report", "--skip-empty", env=env)


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_core)")
def tests_unit_core(session: nox.Session) -> None:
    """Execute saga, device, adapter and platform unit suites."""

    targets = [
        "tests/unit/tenancy",
        "tests/unit/devices",
        "tests/unit/triggers",
        "tests/unit/firestore",
        "tests/unit/aws",
        "tests/unit/providers",
        "tests/unit/platform",
    ]
    _run_suite(session, "core", targets)


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_api)")
def tests_unit_api(session: nox.Session) -> None:
    """Execute the Flask API suites."""

    _run_suite(session, "api", ["tests/unit/api"])


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_logging)")
def tests_unit_logging(session: nox.Session) -> None:
    """Execute logging library unit suites."""

    _run_suite(session, "logging", ["tests/unit/logging"])
