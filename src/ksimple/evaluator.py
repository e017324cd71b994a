"""Right-to-left expression evaluator for k/simple token sequences.

There is no precedence and no parentheses: a verb applies to everything on
its right, and the left operand of a dyadic verb is always exactly one noun
token (a number, a numeric strand or a global).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .environment import Environment, global_slot
from .errors import TokenizeError
from .lexer import Token, adverb_index, tokenize, verb_index
from .values import Value, is_error
from .verbs import apply_adverb, apply_dyadic_verb, apply_monadic_verb


def _symbol_index(tokens: Sequence[Token], pos: int, index_of) -> int:
    if pos < len(tokens) and tokens[pos].kind == "SYMBOL":
        return index_of(str(tokens[pos].value))
    return 0


def _evaluate_from(env: Environment, tokens: Sequence[Token], start: int) -> Value:
    remaining = len(tokens) - start
    if remaining <= 0:
        return env.parse_error("evaluate_expression")

    head = tokens[start]
    if remaining == 1:
        value = env.noun_from_token(head)
        if is_error(value):
            return env.parse_error("evaluate_noun")
        return value

    verb = _symbol_index(tokens, start, verb_index)
    adverb = _symbol_index(tokens, start + 1, adverb_index)

    if verb and adverb:
        operand = _evaluate_from(env, tokens, start + 2)
        if is_error(operand):
            return operand
        return apply_adverb(env, adverb, verb, operand)

    if verb:
        operand = _evaluate_from(env, tokens, start + 1)
        if is_error(operand):
            return operand
        return apply_monadic_verb(env, verb, operand)

    second = tokens[start + 1]
    if head.kind == "GLOBAL" and second.kind == "COLON":
        value = _evaluate_from(env, tokens, start + 2)
        if is_error(value):
            return value
        return env.assign_global(global_slot(str(head.value)), value)

    if second.kind == "SYMBOL":
        left = env.noun_from_token(head)
        if is_error(left):
            return env.parse_error("evaluate_expression")

        right = _evaluate_from(env, tokens, start + 2)
        if is_error(right):
            return right

        dyadic = verb_index(str(second.value))
        if dyadic == 0:
            return env.domain_error("evaluate_expression")
        return apply_dyadic_verb(env, dyadic, left, right)

    return env.parse_error("evaluate_expression")


def evaluate(tokens: Sequence[Token], env: Environment) -> Value:
    """Evaluate one tokenized line against ``env``; failures come back as ``Error``."""
    return _evaluate_from(env, tokens, 0)


def is_assignment(tokens: Sequence[Token]) -> bool:
    return len(tokens) > 1 and tokens[1].kind == "COLON"


@dataclass
class StatefulEvaluate:
    """Callable wrapper that tokenizes and evaluates source lines in a persistent environment."""

    env: Environment = field(default_factory=Environment)

    def __call__(self, source: str) -> Value:
        try:
            tokens = tokenize(source)
        except TokenizeError:
            return self.env.parse_error("tokenize_line")
        return evaluate(tokens, self.env)
