import pytest

from tryon_hand.config import EstimatorConfig, load_config, write_config
from tryon_hand.errors import InvalidArgument
from tryon_hand.placement import DEFAULT_SCALE_FACTOR
from tryon_hand.types import FingerSelector


def test_defaults():
    config = EstimatorConfig()
    assert config.finger is FingerSelector.RING
    assert config.scale_factor == DEFAULT_SCALE_FACTOR
    assert config.preferred_hand is None


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.yaml")) == EstimatorConfig()


def test_load_yaml(tmp_path):
    path = tmp_path / "tryon.yaml"
    path.write_text("finger: 1\nscale_factor: 0.5\npreferred_hand: Left\n", encoding="utf-8")

    config = load_config(str(path))
    assert config.finger is FingerSelector.INDEX
    assert config.scale_factor == 0.5
    assert config.preferred_hand == "left"


def test_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == EstimatorConfig()


def test_write_then_load(tmp_path):
    path = str(tmp_path / "configs" / "tryon.yaml")
    config = EstimatorConfig(finger="pinky", preferred_hand="right", max_hands=1)
    write_config(path, config)
    assert load_config(path) == config


@pytest.mark.parametrize(
    "data",
    [
        {"fingers": "ring"},
        {"finger": "toe"},
        {"scale_factor": 3.0},
        {"preferred_hand": "both"},
        {"max_hands": 0},
        {"min_detection_confidence": 1.5},
    ],
)
def test_invalid_values(data):
    with pytest.raises(InvalidArgument):
        EstimatorConfig.from_mapping(data)


def test_non_mapping_root(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- ring\n", encoding="utf-8")
    with pytest.raises(InvalidArgument):
        load_config(str(path))


def test_with_overrides_skips_none():
    config = EstimatorConfig(finger="middle").with_overrides(finger=None, scale_factor=0.3)
    assert config.finger is FingerSelector.MIDDLE
    assert config.scale_factor == 0.3
