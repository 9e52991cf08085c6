"""Tests for progress tracking monotonic guarantee."""

from dtcc_lift.common import ProgressTracker, get_progress, report_progress


class TestMonotonicProgress:
    """Progress within a phase must never decrease."""

    def test_lower_percent_does_not_decrease_progress(self):
        with ProgressTracker(phases={"work": 1.0}, mode="silent") as tracker:
            with tracker.phase("work"):
                report_progress(percent=80)
                phase = tracker.state.phases["work"]
                assert phase.progress == 0.8

                report_progress(percent=60)
                assert phase.progress == 0.8

                report_progress(percent=90)
                assert phase.progress == 0.9

    def test_current_and_total(self):
        with ProgressTracker(phases={"walls": 1.0}, mode="silent") as tracker:
            with tracker.phase("walls"):
                report_progress(current=1, total=4)
                assert tracker.state.phases["walls"].progress == 0.25

    def test_overall_percent_monotonic_across_phases(self):
        with ProgressTracker(phases={"points": 0.5, "walls": 0.5}, mode="silent") as tracker:
            prev = 0.0
            for name in ("points", "walls"):
                with tracker.phase(name):
                    for pct in [0, 25, 50, 75, 100]:
                        report_progress(percent=pct)
                        current = tracker.state.overall_percent
                        assert current >= prev
                        prev = current
            assert tracker.state.overall_percent == 100.0


def test_report_without_tracker_is_a_no_op():
    assert get_progress() is None
    report_progress(percent=50, message="nothing listens")


def test_callback_mode():
    updates = []
    tracker = ProgressTracker(
        phases={"lift": 1.0}, callback=updates.append, min_update_interval=0
    )
    with tracker:
        assert get_progress() is tracker
        with tracker.phase("lift", "Lifting features"):
            report_progress(percent=50)
    assert updates
    assert updates[-1]["phase"] == "lift"
    assert updates[-1]["phases"]["lift"]["completed"]
    assert get_progress() is None


def test_json_mode(capsys):
    import sys

    with ProgressTracker(phases={"lift": 1.0}, mode="json", output=sys.stdout, min_update_interval=0) as tracker:
        with tracker.phase("lift"):
            report_progress(percent=100)
    out = capsys.readouterr().out
    assert "##PROGRESS##" in out
    assert "progress_complete" in out
