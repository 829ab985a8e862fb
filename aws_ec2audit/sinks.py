"""
Output sinks that receive findings as the runner produces them
"""
import json
import sys

from colorama import Fore, Style

from .models import Outcome

STATUS_LABELS = {
    Outcome.PASS: ('Secure:', 'Passes', Fore.GREEN),
    Outcome.WARN: ('Warning:', 'Warnings', Fore.YELLOW),
    Outcome.ERROR: ('Error:', 'Errors', Fore.RED),
}
STATUS_WIDTH = 11


class TextSink:
    """
    Print each finding as one line, e.g.::

        Secure:    Image ami-1234 is not publicly shared [3 Passes]
        Warning:   EBS Volume vol-1234 is not encrypted [1 Warnings]

    The trailing number counts the findings of that status printed so far.
    With ``show_remediation`` each warning is followed by its fix command.
    """

    def __init__(self, stream=None, show_remediation=False, color=True):
        self.stream = stream or sys.stdout
        self.show_remediation = show_remediation
        self.color = color
        self.counts = {outcome: 0 for outcome in Outcome}

    def format(self, finding):
        self.counts[finding.outcome] += 1
        label, plural, color = STATUS_LABELS[finding.outcome]
        status = label.ljust(STATUS_WIDTH)
        if self.color:
            status = f"{color}{status}{Style.RESET_ALL}"
        return f"{status}{finding.message} [{self.counts[finding.outcome]} {plural}]"

    def emit(self, finding):
        print(self.format(finding), file=self.stream)
        if self.show_remediation and finding.outcome is Outcome.WARN and finding.remediation:
            print("", file=self.stream)
            print(finding.remediation, file=self.stream)
            print("", file=self.stream)


class JsonLinesSink:
    """Write each finding as a JSON object on its own line."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def emit(self, finding):
        print(json.dumps(finding.to_dict(), ensure_ascii=False), file=self.stream)
        self.stream.flush()


class MemorySink:
    """Keep findings in a list, in the order they were emitted."""

    def __init__(self):
        self.findings = []

    def emit(self, finding):
        self.findings.append(finding)
