"""Commit message validation."""
from typing import List, Tuple

from .models import ParsedMessage, Violation
from .parser import parse
from .rules import RuleSet
from .validation import create_rule_chain


class CommitMessageValidator:
    """Validates single messages against a rule set."""

    def __init__(self, rules: RuleSet):
        self.rules = rules
        self.rule_chain = create_rule_chain()

    def validate(self, raw: str) -> Tuple[ParsedMessage, List[Violation]]:
        """Parse a raw message and evaluate it against the rules."""
        parsed = parse(raw)
        return parsed, self.rule_chain.handle(parsed, self.rules)
