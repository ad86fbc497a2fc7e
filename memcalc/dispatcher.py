import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from memcalc.config import BANNER, DEFAULT_CONFIG, CalcConfig
from memcalc.errors import CalcError
from memcalc.evaluator import evaluate
from memcalc.memory import MemoryStore
from memcalc.tokenizer import MEMORY_MUTATIONS, TokenType, iter_tokens

logger = logging.getLogger(__name__)


def format_number(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    elif math.isinf(x):
        return "inf" if x > 0 else "-inf"
    elif x == 0.0:
        return "-0" if math.copysign(1.0, x) < 0 else "0"
    elif x.is_integer():
        return str(int(x))
    else:
        return repr(x)


def process_line(
    line: str, memory: MemoryStore, previous_result: float, config: CalcConfig = DEFAULT_CONFIG
) -> tuple[str, float]:
    """Runs one input line and returns what to display and the new previous result.

    Raises CalcError subclasses for lines that cannot be processed; in that case neither
    the memory nor the previous result have been changed.
    """
    # pieces after a mutation command are never tokenized
    pieces = iter_tokens(line)
    first = next(pieces, None)

    if first is not None and first.type in MEMORY_MUTATIONS:
        command = first
        delta = previous_result if command.type is TokenType.MEMORY_PLUS else -previous_result
        ignored = len(line.split()) - 1
        if ignored:
            logger.debug("Ignoring %d piece(s) after %s", ignored, command.lexeme)
        value = memory.accumulate(command.name, delta)
        logger.debug("Memory slot %r changed by %s to %s", command.name, delta, value)
        new_previous = value if config.mutation_updates_previous else previous_result
        return f"set memory{command.name} equal {format_number(value)}", new_previous

    tokens = [] if first is None else [first, *pieces]
    result = evaluate(tokens, memory)
    logger.debug("Evaluated %r to %s", line, result)
    return f"{line} equal {format_number(result)}", result


@dataclass
class SessionState:
    memory: MemoryStore = field(default_factory=MemoryStore)
    previous_result: float = 0.0


def run_session(lines: Iterable[str], config: CalcConfig = DEFAULT_CONFIG) -> Iterator[str]:
    """Processes lines until an empty one, yielding one output line per input line."""
    state = SessionState(memory=MemoryStore(max_slots=config.max_slots))
    if config.banner:
        yield BANNER

    for line in lines:
        if not line:
            yield config.farewell
            return
        try:
            display, state.previous_result = process_line(line, state.memory, state.previous_result, config)
        except CalcError as e:
            logger.warning("Rejected line %r: %s", line, type(e).__name__)
            yield f"error: {line}\n{e}"
            continue
        yield display
