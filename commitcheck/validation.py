"""Rule evaluation using Chain of Responsibility pattern.

Unlike a fail-fast chain, every handler runs and violations accumulate so a
single pass reports all problems. A handler may stop the chain when further
checks are meaningless (an unparseable header).
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import ParsedMessage, Violation, ViolationField
from .rules import RuleSet


class RuleHandler(ABC):
    """Abstract base class for rule handlers."""

    stops_chain_on_violation = False

    def __init__(self, next_handler: Optional['RuleHandler'] = None):
        self.next_handler = next_handler

    def handle(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        """Apply this rule and the rest of the chain."""
        violations = self.check(message, rules)
        if violations and self.stops_chain_on_violation:
            return violations
        if self.next_handler:
            violations = violations + self.next_handler.handle(message, rules)
        return violations

    @abstractmethod
    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        """Return the violations of this single rule."""
        pass


class FormatHandler(RuleHandler):
    """Validates that the header matched the Conventional Commit grammar."""

    stops_chain_on_violation = True

    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        if message.type is None or message.subject is None:
            return [Violation(
                ViolationField.FORMAT,
                f"header must follow format: type(scope): subject (got '{message.header}')",
            )]
        return []


class TypeHandler(RuleHandler):
    """Validates that the type is one of the allowed types."""

    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        if message.type not in rules.allowed_types:
            allowed = ", ".join(sorted(rules.allowed_types))
            return [Violation(
                ViolationField.TYPE,
                f"type '{message.type}' is not allowed (allowed: {allowed})",
            )]
        return []


class ScopeHandler(RuleHandler):
    """Validates scope presence and casing."""

    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        violations = []
        # "()" counts as absent for the requirement but passes the case check
        if rules.require_scope and not message.scope:
            violations.append(Violation(ViolationField.SCOPE, "scope is required"))
        if message.scope and message.scope != message.scope.lower():
            violations.append(Violation(
                ViolationField.SCOPE,
                f"scope must be lowercase (got '{message.scope}')",
            ))
        return violations


class SubjectCaseHandler(RuleHandler):
    """Validates that the subject does not start with an uppercase letter."""

    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        if message.subject[:1].isupper():
            return [Violation(
                ViolationField.SUBJECT_CASE,
                "subject must not start with an uppercase letter",
            )]
        return []


class SubjectLengthHandler(RuleHandler):
    """Validates the subject length against the configured bounds."""

    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        length = len(message.subject.rstrip(".").strip())
        if length < rules.min_subject_length:
            return [Violation(
                ViolationField.SUBJECT_LENGTH_MIN,
                f"subject too short ({length} < {rules.min_subject_length})",
            )]
        if length > rules.max_subject_length:
            return [Violation(
                ViolationField.SUBJECT_LENGTH_MAX,
                f"subject too long ({length} > {rules.max_subject_length})",
            )]
        return []


class SubjectPunctuationHandler(RuleHandler):
    """Validates that the subject doesn't end with a period."""

    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        if message.subject.endswith('.'):
            return [Violation(
                ViolationField.SUBJECT_PUNCTUATION,
                "subject must not end with a period",
            )]
        return []


class HeaderLengthHandler(RuleHandler):
    """Validates the total header length."""

    def check(self, message: ParsedMessage, rules: RuleSet) -> List[Violation]:
        if len(message.header) > rules.max_header_length:
            return [Violation(
                ViolationField.HEADER_LENGTH,
                f"header too long ({len(message.header)} > {rules.max_header_length})",
            )]
        return []


def create_rule_chain() -> RuleHandler:
    """Create the default rule chain, in evaluation order."""
    header_length = HeaderLengthHandler()
    punctuation = SubjectPunctuationHandler(header_length)
    subject_length = SubjectLengthHandler(punctuation)
    subject_case = SubjectCaseHandler(subject_length)
    scope = ScopeHandler(subject_case)
    commit_type = TypeHandler(scope)
    return FormatHandler(commit_type)


_DEFAULT_CHAIN = create_rule_chain()


def evaluate(message: ParsedMessage, rules: RuleSet) -> List[Violation]:
    """Apply every rule to a parsed message.

    Args:
        message: The parsed message
        rules: The rule set for this run

    Returns:
        List[Violation]: Violations in rule order, empty if the message is valid
    """
    return _DEFAULT_CHAIN.handle(message, rules)
