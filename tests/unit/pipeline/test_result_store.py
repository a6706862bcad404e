# tests/unit/pipeline/test_result_store.py — v1
"""Tests for pipeline/result_store.py — run lifecycle and tokens."""

from __future__ import annotations

import pytest

from reviewchain.pipeline.errors import StepBusyError


class TestLifecycle:
    def test_never_run_is_idle(self, result_store):
        result = result_store.get("a")
        assert result.status == "idle"
        assert result.output == ""
        assert result.timestamp is None
        assert result_store.has("a") is False

    def test_begin_and_complete(self, result_store):
        run_id = result_store.begin_run("a")
        assert result_store.get("a").status == "running"
        assert result_store.is_current("a", run_id)

        assert result_store.complete_run("a", run_id, "out") is True
        result = result_store.get("a")
        assert result.status == "completed"
        assert result.output == "out"
        assert result.timestamp is not None
        assert result.error is None

    def test_begin_keeps_previous_output(self, result_store):
        run_id = result_store.begin_run("a")
        result_store.complete_run("a", run_id, "first")
        ts = result_store.get("a").timestamp

        result_store.begin_run("a")
        result = result_store.get("a")
        assert result.status == "running"
        assert result.output == "first"
        assert result.timestamp == ts

    def test_begin_while_running(self, result_store):
        result_store.begin_run("a")
        with pytest.raises(StepBusyError):
            result_store.begin_run("a")

    def test_fail_keeps_output(self, result_store):
        run_id = result_store.begin_run("a")
        result_store.complete_run("a", run_id, "first")
        run_id = result_store.begin_run("a")

        assert result_store.fail_run("a", run_id, "boom", "provider") is True
        result = result_store.get("a")
        assert result.status == "error"
        assert result.output == "first"
        assert result.error == "boom"
        assert result.error_tag == "provider"

    def test_retry_after_error_clears_error(self, result_store):
        run_id = result_store.begin_run("a")
        result_store.fail_run("a", run_id, "boom", "provider")
        run_id = result_store.begin_run("a")
        result_store.complete_run("a", run_id, "ok")
        result = result_store.get("a")
        assert result.error is None
        assert result.error_tag is None


class TestStaleTokens:
    def test_stale_completion_discarded(self, result_store):
        run_id = result_store.begin_run("a")
        result_store.abort_run("a", "Pipeline closed", "closed")

        assert result_store.complete_run("a", run_id, "late") is False
        assert result_store.get("a").output == ""
        assert result_store.get("a").error_tag == "closed"

    def test_stale_failure_discarded(self, result_store):
        old = result_store.begin_run("a")
        result_store.abort_run("a", "Pipeline closed", "closed")
        assert result_store.fail_run("a", old, "boom", "provider") is False
        assert result_store.get("a").error == "Pipeline closed"

    def test_unknown_token(self, result_store):
        result_store.begin_run("a")
        assert result_store.complete_run("a", "bogus", "x") is False
        assert result_store.fail_run("missing", "bogus", "x", "provider") is False

    def test_abort_requires_running(self, result_store):
        assert result_store.abort_run("a", "x", "closed") is False

    def test_running_steps(self, result_store):
        result_store.begin_run("a")
        run_id = result_store.begin_run("b")
        result_store.complete_run("b", run_id, "done")
        assert result_store.running_steps() == ["a"]


class TestManualEdits:
    def test_override_output_only(self, result_store):
        run_id = result_store.begin_run("a")
        result_store.fail_run("a", run_id, "boom", "provider")
        updated = result_store.override_output("a", "manual")
        assert updated.output == "manual"
        assert updated.status == "error"
        assert updated.error == "boom"

    def test_override_never_run(self, result_store):
        assert result_store.override_output("a", "manual").status == "idle"
        assert result_store.has("a")

    def test_discard_and_prune(self, result_store):
        for sid in ("a", "b", "c"):
            result_store.override_output(sid, sid)
        result_store.discard("a")
        assert result_store.has("a") is False
        assert result_store.prune({"b"}) == ["c"]
        assert list(result_store.snapshot()) == ["b"]
