import math
from dataclasses import dataclass
from typing import Callable

from memcalc.errors import CalcError
from memcalc.memory import MemoryStore
from memcalc.tokenizer import Token, TokenType, untokenize

MAX_NESTING_DEPTH = 200


@dataclass
class ParserError(CalcError):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    def __str__(self) -> str:
        parsed_tokens = self.tokens[: self.error_token_idx]
        filler_whitespace = " " * (len(untokenize(parsed_tokens)) + (1 if parsed_tokens else 0))
        return "\n".join([f"Parser error: {self.errmsg}", untokenize(self.tokens), filler_whitespace + "^"])


class UnbalancedParens(ParserError):
    pass


class UnexpectedToken(ParserError):
    pass


class UnexpectedEndOfInput(ParserError):
    pass


class TrailingTokens(ParserError):
    pass


class NestingTooDeep(ParserError):
    pass


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


BinaryOperationImpl = Callable[[float, float], float]

ADDITIVE_OPS: dict[TokenType, BinaryOperationImpl] = {
    TokenType.PLUS: lambda a, b: a + b,
    TokenType.MINUS: lambda a, b: a - b,
}
MULTIPLICATIVE_OPS: dict[TokenType, BinaryOperationImpl] = {
    TokenType.STAR: lambda a, b: a * b,
    TokenType.SLASH: _divide,
}


@dataclass
class EvaluationContext:
    tokens: list[Token]
    memory: MemoryStore


def evaluate(tokens: list[Token], memory: MemoryStore) -> float:
    ctx = EvaluationContext(tokens=tokens, memory=memory)
    value, i = consume_additive(ctx, 0)
    if i < len(tokens):
        raise TrailingTokens(
            f"Expression is complete, found extra {tokens[i].type}", tokens=tokens, error_token_idx=i
        )
    return value


def consume_additive(ctx: EvaluationContext, i: int, depth: int = 0) -> tuple[float, int]:
    result, i = consume_multiplicative(ctx, i, depth)
    while i < len(ctx.tokens) and ctx.tokens[i].type in ADDITIVE_OPS:
        op = ADDITIVE_OPS[ctx.tokens[i].type]
        right, i = consume_multiplicative(ctx, i + 1, depth)
        result = op(result, right)
    return result, i


def consume_multiplicative(ctx: EvaluationContext, i: int, depth: int = 0) -> tuple[float, int]:
    result, i = consume_primary(ctx, i, depth)
    while i < len(ctx.tokens) and ctx.tokens[i].type in MULTIPLICATIVE_OPS:
        op = MULTIPLICATIVE_OPS[ctx.tokens[i].type]
        right, i = consume_primary(ctx, i + 1, depth)
        result = op(result, right)
    return result, i


def consume_primary(ctx: EvaluationContext, i: int, depth: int = 0) -> tuple[float, int]:
    tokens = ctx.tokens
    if i >= len(tokens):
        raise UnexpectedEndOfInput("Operand expected, found end of input", tokens=tokens, error_token_idx=i)
    first = tokens[i]
    if first.type is TokenType.NUMBER:
        return first.value, i + 1
    elif first.type is TokenType.MEMORY_REF:
        return ctx.memory.get(first.name), i + 1
    elif first.type is TokenType.BRACKET_OPEN:
        if depth >= MAX_NESTING_DEPTH:
            raise NestingTooDeep(
                f"Brackets nested deeper than {MAX_NESTING_DEPTH} levels", tokens=tokens, error_token_idx=i
            )
        value, j = consume_additive(ctx, i + 1, depth + 1)
        if j >= len(tokens) or tokens[j].type is not TokenType.BRACKET_CLOSE:
            raise UnbalancedParens("Unclosed bracket", tokens=tokens, error_token_idx=i)
        return value, j + 1
    else:
        raise UnexpectedToken(f"Operand expected, found {first.type}", tokens=tokens, error_token_idx=i)
