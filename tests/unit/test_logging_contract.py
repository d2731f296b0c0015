# PATH: tests/unit/test_logging_contract.py
"""
Tests specifically for logging contract enforcement.

No kwargs to logger; only extra={"context": {...}} allowed.
"""

import ast
import json
import logging
import unittest
from pathlib import Path
from typing import Any, Dict, List

from core.logging import (
    ContextAdapter,
    JSONFormatter,
    clear_global_context,
    get_logger,
    log_step,
    set_global_context,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent

CHECKED_SOURCES = [
    "core",
    "execution",
    "services",
    "config",
    "sdk.py",
    "run_route.py",
]


def _python_files() -> List[Path]:
    files = []
    for entry in CHECKED_SOURCES:
        path = PROJECT_ROOT / entry
        if path.is_dir():
            files.extend(sorted(path.rglob("*.py")))
        elif path.exists():
            files.append(path)
    return files


class CapturingHandler(logging.Handler):
    def __init__(self, records_list):
        super().__init__()
        self.records = records_list

    def emit(self, record):
        self.records.append(record)


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        """Find logger calls with invalid kwargs using AST."""
        violations = []
        tree = ast.parse(source_code)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue

            method_name = node.func.attr
            if method_name not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()
            else:
                is_logger = False

            if not is_logger:
                continue

            for kw in node.keywords:
                if kw.arg and kw.arg not in self.ALLOWED_KWARGS:
                    violations.append({
                        "line": node.lineno,
                        "method": method_name,
                        "invalid_kwarg": kw.arg,
                    })

        return violations

    def test_sources_found(self):
        self.assertTrue(any(p.name == "orchestrator.py" for p in _python_files()))

    def test_no_invalid_logger_kwargs(self):
        """No module passes arbitrary kwargs to a logger call."""
        problems = []
        for filepath in _python_files():
            source = filepath.read_text(encoding="utf-8")
            for v in self._find_logger_violations(source):
                problems.append(
                    f"  {filepath.relative_to(PROJECT_ROOT)}:{v['line']}: "
                    f"logger.{v['method']}(..., {v['invalid_kwarg']}=...)"
                )
        if problems:
            self.fail(f"Found {len(problems)} logging violations:\n" + "\n".join(problems))

    def test_detector_flags_kwargs(self):
        violations = self._find_logger_violations('logger.info("x", route_id="r1")\n')
        self.assertEqual(violations[0]["invalid_kwarg"], "route_id")


class TestLoggingContextCapture(unittest.TestCase):
    """Tests that context is properly captured in log records."""

    def setUp(self):
        self.captured_records = []
        self.base = logging.getLogger(f"test_capture_{id(self)}")
        self.base.setLevel(logging.DEBUG)
        self.base.handlers = [CapturingHandler(self.captured_records)]
        self.base.propagate = False
        clear_global_context()

    def tearDown(self):
        clear_global_context()

    def test_adapter_merges_default_and_call_context(self):
        adapter = ContextAdapter(self.base, {"component": "orchestrator"})
        adapter.info("Step done", extra={"context": {"route_id": "r1"}})

        record = self.captured_records[0]
        self.assertEqual(record.context, {"component": "orchestrator", "route_id": "r1"})

    def test_get_logger_returns_adapter(self):
        logger = get_logger("hops.test", component="x")
        self.assertIsInstance(logger, ContextAdapter)
        self.assertEqual(logger.extra, {"component": "x"})

    def test_log_step_context(self):
        log_step(ContextAdapter(self.base, {}), "r1", 2, "DONE", step_id="r1-s2", to_amount="8")

        context = self.captured_records[0].context
        self.assertEqual(context["route_id"], "r1")
        self.assertEqual(context["step_index"], 2)
        self.assertEqual(context["to_amount"], "8")

    def test_json_formatter_includes_global_context(self):
        set_global_context(service="hops-test")
        self.base.error("Caught", extra={"context": {"route_id": "r1"}})

        entry = json.loads(JSONFormatter().format(self.captured_records[0]))
        self.assertEqual(entry["level"], "ERROR")
        self.assertEqual(entry["message"], "Caught")
        self.assertEqual(entry["context"], {"service": "hops-test", "route_id": "r1"})

    def test_exc_info_with_context(self):
        """exc_info works alongside context."""
        try:
            raise ValueError("Test error")
        except ValueError:
            self.base.error(
                "Caught error",
                exc_info=True,
                extra={"context": {"operation": "test"}},
            )

        entry = json.loads(JSONFormatter().format(self.captured_records[0]))
        self.assertIn("ValueError", entry["context"]["exception"])
        self.assertEqual(entry["context"]["operation"], "test")


if __name__ == "__main__":
    unittest.main()
