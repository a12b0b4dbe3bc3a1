# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Condition Evaluator

Minimal expression grammar for condition nodes. Never raises: anything it
cannot make sense of evaluates to False.

Grammar:
    true | false            (case-insensitive)
    A == B  |  A != B       (trimmed string equality)
    A > B   |  A < B        (floating point; non-numeric operands -> False)
"""

from typing import Optional


def _parse_number(text: str) -> Optional[float]:
    try:
        return float(text.strip())
    except ValueError:
        return None


def _split_pair(condition: str, operator: str):
    parts = condition.split(operator)
    if len(parts) != 2:
        return None
    return parts[0].strip(), parts[1].strip()


def _compare_numbers(condition: str, operator: str) -> Optional[bool]:
    pair = _split_pair(condition, operator)
    if pair is None:
        return None
    left, right = _parse_number(pair[0]), _parse_number(pair[1])
    if left is None or right is None:
        return None
    return left > right if operator == ">" else left < right


def evaluate_condition(condition: str) -> bool:
    """
    Evaluate a condition string.

    Examples:
        >>> evaluate_condition("TRUE")
        True
        >>> evaluate_condition("3 > 2")
        True
        >>> evaluate_condition("a==b")
        False
    """
    condition = condition.strip()

    if condition.lower() == "true":
        return True
    if condition.lower() == "false":
        return False

    if "==" in condition:
        pair = _split_pair(condition, "==")
        if pair is not None:
            return pair[0] == pair[1]

    if "!=" in condition:
        pair = _split_pair(condition, "!=")
        if pair is not None:
            return pair[0] != pair[1]

    for operator in (">", "<"):
        if operator in condition:
            result = _compare_numbers(condition, operator)
            if result is not None:
                return result

    return False
