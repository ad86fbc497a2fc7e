import enum
import re
from dataclasses import dataclass, field
from typing import Iterator

from memcalc.errors import CalcError

MEMORY_PREFIX = "mem"


@dataclass
class TokenizerError(CalcError):
    errmsg: str
    line: str
    error_char_idx: int

    def __str__(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 15)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.line), self.error_char_idx + 15)
        print_ellipsis_post = print_end_idx < len(self.line)
        return "\n".join(
            [
                f"[Tokenizer error] {self.errmsg}",
                (
                    ("..." if print_ellipsis_pre else "")
                    + self.line[print_start_idx:print_end_idx]
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class MalformedNumber(TokenizerError):
    pass


class TokenType(enum.Enum):
    NUMBER = enum.auto()
    MEMORY_REF = enum.auto()
    MEMORY_PLUS = enum.auto()
    MEMORY_MINUS = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()

    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


MEMORY_MUTATIONS = {TokenType.MEMORY_PLUS, TokenType.MEMORY_MINUS}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    # derived from lexeme, not part of equality
    value: float = field(default=0.0, compare=False)
    name: str = ""

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


OPERATOR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "(": TokenType.BRACKET_OPEN,
    ")": TokenType.BRACKET_CLOSE,
}


def _classify_memory(piece: str) -> Token:
    name = piece[len(MEMORY_PREFIX) :]
    if name.endswith("+"):
        return Token(type=TokenType.MEMORY_PLUS, lexeme=piece, name=name[:-1])
    elif name.endswith("-"):
        return Token(type=TokenType.MEMORY_MINUS, lexeme=piece, name=name[:-1])
    else:
        return Token(type=TokenType.MEMORY_REF, lexeme=piece, name=name)


def _parse_number(piece: str) -> float | None:
    # also accepts inf, nan and 1_000
    try:
        return float(piece)
    except ValueError:
        return None


def iter_tokens(line: str) -> Iterator[Token]:
    """Lazy tokenize, a malformed piece only fails once the iteration reaches it"""
    for match in re.finditer(r"\S+", line):
        piece = match.group()
        if piece in OPERATOR_TOKENS:
            yield Token(type=OPERATOR_TOKENS[piece], lexeme=piece)
        elif piece.startswith(MEMORY_PREFIX):
            yield _classify_memory(piece)
        else:
            number = _parse_number(piece)
            if number is None:
                raise MalformedNumber(f"Not a number: {piece!r}", line=line, error_char_idx=match.start())
            yield Token(type=TokenType.NUMBER, lexeme=piece, value=number)


def tokenize(line: str) -> list[Token]:
    return list(iter_tokens(line))


def untokenize(tokens: list[Token]) -> str:
    return " ".join(t.lexeme for t in tokens)
