import logging

import pytest

from oslab.labs import BankersLabState, CPULabState, LabSession, MemoryLabState, recompute
from oslab.models import PagingResult, SafetyResult, ScheduleResult
from oslab.policies import ReplacementPolicy
from oslab.sync import Lab, ProgressLedger, report_progress


def test_recompute_cpu_lab():
    result = recompute(CPULabState.sample("rr"))
    assert isinstance(result, ScheduleResult)
    assert result.quantum == 2
    assert result.timeline[-1].end_time == 8


def test_recompute_memory_lab():
    result = recompute(MemoryLabState.sample(ReplacementPolicy.LRU))
    assert isinstance(result, PagingResult)
    assert len(result.steps) == 10


def test_recompute_bankers_lab():
    result = recompute(BankersLabState.sample())
    assert isinstance(result, SafetyResult)
    assert result.safe


def test_recompute_is_pure():
    state = CPULabState.sample("srtf")
    assert recompute(state) == recompute(state)


def test_unknown_state():
    with pytest.raises(TypeError):
        recompute(object())


def test_session_reports_progress():
    ledger = ProgressLedger()
    session = LabSession(reporter=ledger, user_id="u1")
    session.run(BankersLabState.sample())
    session.run(MemoryLabState.sample())
    session.run(MemoryLabState.sample())

    progress = ledger.progress_for("u1")
    assert progress.tasks == 3
    assert progress.stats == {"deadlock": 2, "memory": 4}
    assert progress.last_sync is not None


def test_session_without_user_does_not_report():
    ledger = ProgressLedger()
    result = LabSession(reporter=ledger).run(CPULabState.sample())
    assert result.timeline
    assert ledger.users == {}


def test_failing_reporter_does_not_break_the_lab(caplog):
    def broken(user_id, lab, task_count):
        raise ConnectionError("offline")

    with caplog.at_level(logging.WARNING, logger="oslab.sync"):
        result = LabSession(reporter=broken, user_id="u1").run(BankersLabState.sample())

    assert result.safe
    assert "offline" in caplog.text


def test_report_progress_return_value():
    ledger = ProgressLedger()
    assert report_progress(ledger, "u2", Lab.CONCURRENCY)
    assert not report_progress(None, "u2", Lab.CPU)
    assert not report_progress(ledger, None, Lab.CPU)
    assert ledger.progress_for("u2").stats == {"concurrency": 2}
