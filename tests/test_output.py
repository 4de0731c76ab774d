"""Tests for sshsession.session.output."""

from sshsession.session.output import OutputAggregator


class TestOutputAggregator:
    def test_starts_empty(self):
        agg = OutputAggregator()
        assert agg.last_output == ""
        assert agg.session_transcript == ""

    def test_record_command_only_touches_transcript(self):
        agg = OutputAggregator()
        agg.record_command("ls")
        assert agg.session_transcript == "Session Command: ls\n"
        assert agg.last_output == ""

    def test_output_replaces_last_and_appends_transcript(self):
        agg = OutputAggregator()
        agg.record_command("one")
        agg.record_output("A\n")
        agg.record_command("two")
        agg.record_output("B\n")

        assert agg.last_output == "B\n"
        assert agg.session_transcript == (
            "Session Command: one\nA\nSession Command: two\nB\n"
        )

    def test_clear_last_output_keeps_transcript(self):
        agg = OutputAggregator()
        agg.record_command("one")
        agg.record_output("A\n")

        agg.clear_last_output()

        assert agg.last_output == ""
        assert agg.session_transcript == "Session Command: one\nA\n"
