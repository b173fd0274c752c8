import pytest

from schedsim.config import DEFAULT_QUANTUM, MAX_TICKS, load_config
from schedsim.errors import InvalidInput


def test_defaults():
    config = load_config({})
    assert config.quantum == DEFAULT_QUANTUM
    assert config.max_ticks == MAX_TICKS
    assert config.log_level == "WARNING"


def test_environment_overrides():
    config = load_config(
        {
            "SCHEDSIM_QUANTUM": "4",
            "SCHEDSIM_STEP_DELAY": "0",
            "SCHEDSIM_MAX_TICKS": "50",
            "SCHEDSIM_LOG_LEVEL": "debug",
        }
    )
    assert config.quantum == 4
    assert config.step_delay == 0.0
    assert config.max_ticks == 50
    assert config.log_level == "DEBUG"


def test_blank_values_fall_back_to_defaults():
    assert load_config({"SCHEDSIM_QUANTUM": " "}).quantum == DEFAULT_QUANTUM


@pytest.mark.parametrize(
    "env",
    [
        {"SCHEDSIM_QUANTUM": "0"},
        {"SCHEDSIM_QUANTUM": "two"},
        {"SCHEDSIM_STEP_DELAY": "-1"},
        {"SCHEDSIM_MAX_TICKS": "0"},
        {"SCHEDSIM_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(InvalidInput):
        load_config(env)
