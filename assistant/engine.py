"""
Intent Matcher - Keyword rules and canned responses
===================================================

This module implements the keyword matcher behind the chat assistant.
Incoming text is lower-cased and tested against an ordered rule table;
the first rule with any trigger substring present wins. Unmatched text
gets a randomly chosen fallback reply, so every message gets an answer.
"""

import random
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Tuple

from core.exceptions import RuleError
from core.logging import get_logger

logger = get_logger("assistant.engine")

DEFAULT_MAX_INPUT_LENGTH = 4000


@dataclass(frozen=True)
class Rule:
    """
    A single FAQ rule.

    Attributes:
        name (str): Unique rule name, used for logging and introspection
        triggers (tuple): Lower-case substrings, any of which activates the rule
        response (str): Canned response returned on a match
    """
    name: str
    triggers: Tuple[str, ...]
    response: str

    def __post_init__(self):
        object.__setattr__(self, "triggers", tuple(t.lower() for t in self.triggers))

    def matches(self, normalized: str) -> bool:
        """Check an already lower-cased message against the triggers."""
        return any(trigger in normalized for trigger in self.triggers)

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to dictionary."""
        return {
            "name": self.name,
            "triggers": list(self.triggers),
            "response": self.response,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rule":
        """
        Create rule from dictionary.

        Raises:
            RuleError: If required keys are missing or have the wrong type
        """
        if not isinstance(data, dict):
            raise RuleError("Rule entry must be a mapping", {"entry": repr(data)})

        name = data.get("name")
        triggers = data.get("triggers")
        response = data.get("response")

        if not isinstance(name, str) or not name:
            raise RuleError("Rule is missing a name", {"entry": data})
        if isinstance(triggers, str) or not isinstance(triggers, list):
            raise RuleError("Rule triggers must be a list", {"rule": name})
        if not all(isinstance(t, str) for t in triggers):
            raise RuleError("Rule triggers must be strings", {"rule": name})
        if not isinstance(response, str):
            raise RuleError("Rule response must be a string", {"rule": name})

        return cls(name=name, triggers=tuple(triggers), response=response)


@dataclass(frozen=True)
class RuleMatch:
    """
    Result of a rule matching a message.

    Attributes:
        rule (Rule): The matching rule
        message (str): The original message
    """
    rule: Rule
    message: str

    @property
    def response(self) -> str:
        return self.rule.response


@dataclass(frozen=True)
class RuleTable:
    """
    Immutable ordered rule table plus the fallback replies.

    Declaration order is evaluation order. The table is validated on
    construction so that matching can never fail afterwards.
    """
    rules: Tuple[Rule, ...]
    fallbacks: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "fallbacks", tuple(self.fallbacks))
        self._validate()

    def _validate(self) -> None:
        if not self.fallbacks:
            raise RuleError("Rule table needs at least one fallback response")

        if any(not f.strip() for f in self.fallbacks):
            raise RuleError("Fallback responses cannot be empty")

        seen = set()
        for rule in self.rules:
            if rule.name in seen:
                raise RuleError("Duplicate rule name", {"rule": rule.name})
            seen.add(rule.name)

            if not rule.triggers or any(not t for t in rule.triggers):
                raise RuleError("Rule triggers cannot be empty", {"rule": rule.name})

            if not rule.response.strip():
                raise RuleError("Rule response cannot be empty", {"rule": rule.name})

    def get_rule(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rules": [rule.to_dict() for rule in self.rules],
            "fallbacks": list(self.fallbacks),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleTable":
        if not isinstance(data, dict):
            raise RuleError("Rule table must be a mapping")

        rules = data.get("rules") or []
        fallbacks = data.get("fallbacks") or []
        if not isinstance(rules, list) or not isinstance(fallbacks, list):
            raise RuleError("'rules' and 'fallbacks' must be lists")
        if not all(isinstance(f, str) for f in fallbacks):
            raise RuleError("Fallback responses must be strings")

        return cls(
            rules=tuple(Rule.from_dict(entry) for entry in rules),
            fallbacks=tuple(fallbacks),
        )


class IntentMatcher:
    """
    First-match-wins keyword matcher.

    The matcher keeps no state between calls; the only randomness is
    the fallback choice, drawn from the injected random source.

    Example:
        matcher = IntentMatcher()

        matcher.respond("How do I apply for this job?")
        # -> the application process answer

        match = matcher.match("asdkjasdlk")
        # -> None, respond() would pick a fallback
    """

    def __init__(
        self,
        table: Optional[RuleTable] = None,
        rng: Optional[random.Random] = None,
        max_input_length: int = DEFAULT_MAX_INPUT_LENGTH
    ):
        """
        Initialize the matcher.

        Args:
            table: Rule table (defaults to the built-in FAQ table)
            rng: Random source for fallback selection
            max_input_length: Inputs are truncated to this many characters
        """
        if table is None:
            from .faq import default_rule_table
            table = default_rule_table()

        if max_input_length < 1:
            raise ValueError(f"max_input_length must be positive, got {max_input_length}")

        self.table = table
        self.rng = rng or random.Random()
        self.max_input_length = max_input_length

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self.table.rules

    @property
    def fallbacks(self) -> Tuple[str, ...]:
        return self.table.fallbacks

    def normalize(self, message: str) -> str:
        return message[:self.max_input_length].lower()

    def match(self, message: str) -> Optional[RuleMatch]:
        """
        Find the first rule, in declaration order, that matches a message.

        Args:
            message: Free-form user text

        Returns:
            RuleMatch if any rule matched, None otherwise
        """
        normalized = self.normalize(message)
        for rule in self.table.rules:
            if rule.matches(normalized):
                return RuleMatch(rule=rule, message=message)
        return None

    def match_all(self, message: str) -> List[RuleMatch]:
        """
        Find every matching rule in evaluation order.

        Only the first entry decides the response; the rest show which
        later rules are shadowed for this message.
        """
        normalized = self.normalize(message)
        return [
            RuleMatch(rule=rule, message=message)
            for rule in self.table.rules
            if rule.matches(normalized)
        ]

    def fallback(self) -> str:
        return self.rng.choice(self.table.fallbacks)

    def respond(self, message: str) -> str:
        """
        Map one message to exactly one response string.

        Args:
            message: Free-form user text, possibly empty

        Returns:
            The first matching rule's response, or a random fallback
        """
        match = self.match(message)
        if match:
            logger.debug(f"Matched rule '{match.rule.name}'")
            return match.response

        logger.debug("No rule matched, using fallback")
        return self.fallback()


def build_matcher(
    table: Optional[RuleTable] = None,
    seed: Optional[int] = None,
    max_input_length: int = DEFAULT_MAX_INPUT_LENGTH
) -> IntentMatcher:
    """Create a matcher, optionally with a seeded random source."""
    rng = random.Random(seed) if seed is not None else None
    return IntentMatcher(table=table, rng=rng, max_input_length=max_input_length)


_default_matcher: Optional[IntentMatcher] = None


def respond(message: str) -> str:
    """Respond using the built-in FAQ table."""
    global _default_matcher

    if _default_matcher is None:
        _default_matcher = IntentMatcher()
    return _default_matcher.respond(message)
