import math

import pytest

from memcalc.config import BANNER, CalcConfig
from memcalc.dispatcher import format_number, process_line, run_session
from memcalc.evaluator import TrailingTokens
from memcalc.memory import MemoryFullError, MemoryStore
from memcalc.tokenizer import MalformedNumber

QUIET = CalcConfig(banner=False)


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(3.0, "3"),
        pytest.param(-12.0, "-12"),
        pytest.param(0.0, "0"),
        pytest.param(-0.0, "-0"),
        pytest.param(0.5, "0.5"),
        pytest.param(1 / 3, "0.3333333333333333"),
        pytest.param(math.inf, "inf"),
        pytest.param(-math.inf, "-inf"),
        pytest.param(math.nan, "NaN"),
    ],
)
def test_format_number(value: float, expected: str) -> None:
    assert format_number(value) == expected


def test_expression_becomes_previous_result() -> None:
    memory = MemoryStore()
    display, previous = process_line("1 + 2", memory, 0.0)
    assert display == "1 + 2 equal 3"
    assert previous == 3.0
    assert len(memory) == 0


def test_memory_plus_and_minus() -> None:
    memory = MemoryStore()
    display, previous = process_line("memx+", memory, 5.0)
    assert display == "set memoryx equal 5"
    assert previous == 5.0

    display, previous = process_line("memx-", memory, 2.0)
    assert display == "set memoryx equal 3"
    assert previous == 2.0
    assert memory.get("x") == 3.0


def test_memory_command_ignores_trailing_tokens() -> None:
    memory = MemoryStore()
    display, _ = process_line("mem+ 5 whatever", memory, 17.0)
    assert display == "set memory equal 17"
    assert memory.get("") == 17.0


def test_memory_command_skips_malformed_trailing_tokens() -> None:
    memory = MemoryStore()
    memory.accumulate("x", 10.0)
    display, previous = process_line("memx- ( 1 + oops", memory, 4.0)
    assert display == "set memoryx equal 6"
    assert previous == 4.0


def test_session_error_shows_whole_line() -> None:
    line = "1 + 2 + 3 + 4 + 5 + 6 + 7 + 8 + 9 + abc"
    outputs = list(run_session(["mem+", "memy+", line], CalcConfig(banner=False, max_slots=1)))
    assert outputs[1].splitlines()[0] == "error: memy+"
    assert outputs[1].splitlines()[1].startswith("Memory is full")
    assert outputs[2].splitlines()[0] == f"error: {line}"


def test_mutation_can_update_previous_result() -> None:
    memory = MemoryStore()
    memory.accumulate("x", 10.0)
    _, previous = process_line("memx+", memory, 5.0, CalcConfig(mutation_updates_previous=True))
    assert previous == 15.0


def test_malformed_line_leaves_state_alone() -> None:
    memory = MemoryStore()
    memory.accumulate("x", 1.0)
    with pytest.raises(MalformedNumber):
        process_line("abc + 1", memory, 4.0)
    assert memory.slots() == {"x": 1.0}


def test_full_memory_fails_line() -> None:
    memory = MemoryStore(max_slots=1)
    process_line("mema+", memory, 1.0)
    with pytest.raises(MemoryFullError):
        process_line("memb+", memory, 1.0)


def test_session_transcript() -> None:
    lines = [
        "1 + 2",
        "3 * 4",
        "memtotal+",
        "memtotal + 5",
        "memtotal-",
        "memtotal * 2",
        "",
        "7 * 7",
    ]
    assert list(run_session(lines, QUIET)) == [
        "1 + 2 equal 3",
        "3 * 4 equal 12",
        "set memorytotal equal 12",
        "memtotal + 5 equal 17",
        "set memorytotal equal -5",
        "memtotal * 2 equal -10",
        "Bye!",
    ]


def test_session_banner_and_farewell() -> None:
    outputs = list(run_session(["", "1 + 1"], CalcConfig(farewell="ciao")))
    assert outputs == [BANNER, "ciao"]


def test_session_ends_with_input() -> None:
    assert list(run_session(["2 / 4"], QUIET)) == ["2 / 4 equal 0.5"]


def test_session_recovers_from_bad_lines() -> None:
    outputs = list(run_session(["1 + 1", "abc + 1", "1 2", "mem+", "mem"], QUIET))
    assert outputs[0] == "1 + 1 equal 2"
    assert outputs[1].startswith("error: abc + 1\n[Tokenizer error] Not a number: 'abc'")
    assert outputs[2].startswith("error: 1 2\nParser error:")
    # the failed lines did not replace the previous result
    assert outputs[3] == "set memory equal 2"
    assert outputs[4] == "mem equal 2"


def test_session_division_by_zero_is_displayed() -> None:
    assert list(run_session(["1 / 0", "0 / 0", "-1 / 0"], QUIET)) == [
        "1 / 0 equal inf",
        "0 / 0 equal NaN",
        "-1 / 0 equal -inf",
    ]


def test_trailing_tokens_error_is_parser_error() -> None:
    with pytest.raises(TrailingTokens):
        process_line("1 + 2 3", MemoryStore(), 0.0)
