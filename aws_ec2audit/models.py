"""
Data model for AWS EC2 Audit: outcomes, findings, rules and the run tally
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

# Resource id used for findings that concern a whole rule rather than one resource
RULE_SCOPE = '*'


class Outcome(str, Enum):
    """Classification of a single (rule, resource) evaluation."""

    PASS = 'pass'
    WARN = 'warn'
    ERROR = 'error'


class EmptyPolicy(str, Enum):
    """What a rule reports when its lister returns no candidates."""

    EMPTY_MEANS_PASS = 'empty-means-pass'
    EMPTY_MEANS_NOOP = 'empty-means-noop'


@dataclass(frozen=True)
class Finding:
    rule_id: str
    resource_id: str
    outcome: Outcome
    message: str
    remediation: Optional[str] = None

    def to_dict(self):
        return {
            'rule_id': self.rule_id,
            'resource_id': self.resource_id,
            'outcome': self.outcome.value,
            'message': self.message,
            'remediation': self.remediation,
        }


@dataclass
class AuditTally:
    """
    Running counters for one audit run.

    ``total`` always equals ``passed + warned``. Error findings are counted
    separately in ``errors`` and never contribute to ``total``.
    """

    total: int = 0
    passed: int = 0
    warned: int = 0
    errors: int = 0

    def record(self, finding):
        """
        Count a finding's outcome.

        Args:
            finding: Finding produced by the runner

        Returns:
            AuditTally: self, for chaining
        """
        if finding.outcome is Outcome.PASS:
            self.total += 1
            self.passed += 1
        elif finding.outcome is Outcome.WARN:
            self.total += 1
            self.warned += 1
        else:
            self.errors += 1
        return self

    def to_dict(self):
        return {
            'total': self.total,
            'passed': self.passed,
            'warned': self.warned,
            'errors': self.errors,
        }


@dataclass(frozen=True)
class Rule:
    """
    A named audit check.

    ``lister`` returns the candidate resource ids, ``predicate`` answers
    "is this resource compliant". Both may raise CollaboratorError. Listers
    take no arguments: the region and AWS clients they need are bound when
    the rule is built. The message and remediation fields are ``str.format``
    templates that receive ``resource_id``.
    """

    rule_id: str
    title: str
    lister: Callable[[], Sequence[str]]
    predicate: Callable[[str], bool]
    pass_message: str
    warn_message: str
    empty_policy: EmptyPolicy = EmptyPolicy.EMPTY_MEANS_NOOP
    empty_message: Optional[str] = None
    remediation: Optional[str] = None
    group: str = 'ec2'

    def __post_init__(self):
        if self.empty_policy is EmptyPolicy.EMPTY_MEANS_PASS and not self.empty_message:
            raise ValueError(f"Rule {self.rule_id} passes on empty results but has no empty_message")

    def render(self, template, resource_id):
        return template.format(resource_id=resource_id)
