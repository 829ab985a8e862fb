"""
Rule runner: evaluates audit rules in order and streams findings to a sink
"""
import logging

from .exceptions import CollaboratorError
from .models import RULE_SCOPE, AuditTally, EmptyPolicy, Finding, Outcome

logger = logging.getLogger(__name__)


def _emit(finding, tally, sink):
    tally.record(finding)
    sink.emit(finding)


def _error_finding(rule, resource_id, error):
    return Finding(
        rule_id=rule.rule_id,
        resource_id=resource_id,
        outcome=Outcome.ERROR,
        message=f"Unable to check {rule.title.lower()} for {resource_id}: {error}",
    )


def run_rule(rule, tally, sink):
    """
    Evaluate one rule, recording every finding in ``tally`` and forwarding it to ``sink``.

    Args:
        rule: Rule to evaluate
        tally: AuditTally of the current run
        sink: Output sink with an ``emit(finding)`` method
    """
    logger.debug("Running rule %s", rule.rule_id)
    try:
        resource_ids = list(rule.lister())
    except CollaboratorError as e:
        logger.warning("Listing resources for %s failed: %s", rule.rule_id, e)
        _emit(_error_finding(rule, RULE_SCOPE, e), tally, sink)
        return

    if not resource_ids:
        if rule.empty_policy is EmptyPolicy.EMPTY_MEANS_PASS:
            _emit(Finding(rule.rule_id, RULE_SCOPE, Outcome.PASS, rule.empty_message), tally, sink)
        return

    for resource_id in resource_ids:
        try:
            compliant = rule.predicate(resource_id)
        except CollaboratorError as e:
            logger.warning("Checking %s for %s failed: %s", resource_id, rule.rule_id, e)
            _emit(_error_finding(rule, resource_id, e), tally, sink)
            continue

        if compliant:
            finding = Finding(
                rule.rule_id, resource_id, Outcome.PASS,
                rule.render(rule.pass_message, resource_id),
            )
        else:
            remediation = rule.render(rule.remediation, resource_id) if rule.remediation else None
            finding = Finding(
                rule.rule_id, resource_id, Outcome.WARN,
                rule.render(rule.warn_message, resource_id),
                remediation,
            )
        _emit(finding, tally, sink)


def run_audit(rules, sink):
    """
    Run every rule in registration order.

    A failure to list or check a resource only affects that rule or resource;
    the run always continues to the last rule.

    Args:
        rules: Ordered sequence of Rule objects
        sink: Output sink with an ``emit(finding)`` method

    Returns:
        AuditTally: Counters for this run
    """
    tally = AuditTally()
    for rule in rules:
        run_rule(rule, tally, sink)
    logger.debug(
        "Audit finished: %d checked, %d passed, %d warnings, %d errors",
        tally.total, tally.passed, tally.warned, tally.errors,
    )
    return tally
