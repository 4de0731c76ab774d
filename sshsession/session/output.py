"""
Output aggregation for command execution.
"""

from __future__ import annotations

COMMAND_LABEL = "Session Command: {command}\n"


class OutputAggregator:
    """
    Collects command output into two buffers.

    - last_output: output of the most recent command, replaced each time
    - session_transcript: every command label and output, in issue order

    Clearing last_output never touches the transcript.
    """

    def __init__(self):
        self._last_output = ""
        self._transcript: list[str] = []

    @property
    def last_output(self) -> str:
        return self._last_output

    @property
    def session_transcript(self) -> str:
        return "".join(self._transcript)

    def record_command(self, command: str) -> None:
        """Append the label for a command about to run."""
        self._transcript.append(COMMAND_LABEL.format(command=command))

    def record_output(self, output: str) -> None:
        """Replace last_output and append to the transcript."""
        self._last_output = output
        self._transcript.append(output)

    def clear_last_output(self) -> None:
        self._last_output = ""
