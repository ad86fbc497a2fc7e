from pathlib import Path

import pytest

from memcalc.config import DEFAULT_CONFIG, CalcConfig, CalcConfigError, load_config, parse_config


def test_defaults() -> None:
    assert parse_config({}) == DEFAULT_CONFIG
    assert DEFAULT_CONFIG.max_slots is None
    assert DEFAULT_CONFIG.mutation_updates_previous is False


def test_load_config(tmp_path: Path) -> None:
    path = tmp_path / "memcalc.toml"
    path.write_text(
        "[memcalc]\nmax_slots = 10\nmutation_updates_previous = true\nbanner = false\nfarewell = 'See you'\n"
    )
    assert load_config(path) == CalcConfig(
        max_slots=10, mutation_updates_previous=True, banner=False, farewell="See you"
    )


@pytest.mark.parametrize(
    "text, message",
    [
        pytest.param("[memcalc]\nmax_slots = 'ten'\n", "integer"),
        pytest.param("[memcalc]\nmax_slots = 0\n", "positive"),
        pytest.param("[memcalc]\nmax_slots = true\n", "integer"),
        pytest.param("[memcalc]\nbanner = 1\n", "boolean"),
        pytest.param("[memcalc]\nfarewell = 3\n", "string"),
        pytest.param("[memcalc]\nslots = 3\n", "Unknown keys"),
        pytest.param("memcalc = 3\n", "table"),
        pytest.param("[memcalc\n", "Invalid TOML"),
    ],
)
def test_invalid_config(tmp_path: Path, text: str, message: str) -> None:
    path = tmp_path / "memcalc.toml"
    path.write_text(text)
    with pytest.raises(CalcConfigError, match=message):
        load_config(path)


def test_missing_config(tmp_path: Path) -> None:
    with pytest.raises(CalcConfigError, match="Missing"):
        load_config(tmp_path / "nope.toml")
