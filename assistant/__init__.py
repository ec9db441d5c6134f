"""
Assistant Module - Scripted FAQ chat assistant
==============================================

This module provides the keyword-based chat assistant of the job board:
- Ordered first-match-wins FAQ rules
- Random fallback replies for unmatched messages
- Chat sessions with a simulated typing delay
"""

from .engine import IntentMatcher, Rule, RuleMatch, RuleTable, build_matcher, respond
from .faq import default_rule_table, load_rule_table, save_rule_table, rule_table_from_config
from .session import ChatSession, ChatTurn, SessionStore

__all__ = [
    "IntentMatcher",
    "Rule",
    "RuleMatch",
    "RuleTable",
    "build_matcher",
    "respond",
    "default_rule_table",
    "load_rule_table",
    "save_rule_table",
    "rule_table_from_config",
    "ChatSession",
    "ChatTurn",
    "SessionStore",
]
