import pytest
from pydantic import ValidationError

from vecalc.config import HISTORY_FILE, CalculatorConfig, load_config


def test_defaults():
    config = load_config({})
    assert config.prompt == ">> "
    assert config.debug_level == 1
    assert config.history_file == HISTORY_FILE
    assert config.log_level == "WARNING"


def test_environment_overrides():
    config = load_config({
        "VECALC_PROMPT": "vc> ",
        "VECALC_DEBUG_LEVEL": "3",
        "VECALC_LOG_LEVEL": "debug",
        "VECALC_HISTORY_FILE": "~/hist",
        "UNRELATED": "x",
    })
    assert config.prompt == "vc> "
    assert config.debug_level == 3
    assert config.log_level == "DEBUG"
    assert not config.history_file.startswith("~")


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        CalculatorConfig(debug_level=-1)
    with pytest.raises(ValidationError):
        CalculatorConfig(log_level="LOUD")
    with pytest.raises(ValidationError):
        CalculatorConfig(history_file="  ")
