"""
Test Suite for DatasetConfig.

Tests defaults, validated setters and the channel / color space pairing.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from imageset.config import DatasetConfig


# DATASET CONFIG: DEFAULTS
@pytest.mark.unit
def test_dataset_config_defaults():
    config = DatasetConfig()

    assert config.directories == []
    assert config.file_extension == "jpg"
    assert config.dedup_by_basename is True
    assert config.height == 16
    assert config.width == 32
    assert config.channels == 3
    assert config.color_space == "rgb"
    assert config.honor_start_at is False
    assert config.seed is None
    assert config.gc_interval == 2000
    assert config.show_progress is False


# DATASET CONFIG: SETTERS
@pytest.mark.unit
def test_setters_update_fields():
    config = DatasetConfig()

    config.set_directories(["x", "y"])
    config.set_file_extension("png")
    config.set_height(64)
    config.set_width(48)
    config.set_channels(1)
    config.set_color_space("RGB")

    assert config.directories == ["x", "y"]
    assert config.file_extension == "png"
    assert (config.height, config.width, config.channels) == (64, 48, 1)
    assert config.color_space == "rgb"


@pytest.mark.unit
def test_assignment_is_validated():
    config = DatasetConfig()

    with pytest.raises(ValidationError):
        config.set_height(0)
    with pytest.raises(ValidationError):
        config.width = -4
    with pytest.raises(ValidationError):
        config.set_channels(2)
    with pytest.raises(ValidationError):
        config.set_file_extension("")

    assert (config.height, config.width, config.channels) == (16, 32, 3)


@pytest.mark.unit
def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        DatasetConfig(nb_channels=3)


@pytest.mark.unit
def test_directories_accept_path_objects(tmp_path: Path):
    config = DatasetConfig(directories=[tmp_path / "a", str(tmp_path / "b")])

    assert config.directories == [str(tmp_path / "a"), str(tmp_path / "b")]


@pytest.mark.unit
@pytest.mark.parametrize("directories", [None, 3])
def test_non_sequence_directories_are_rejected(directories):
    with pytest.raises(ValidationError, match="sequence of paths"):
        DatasetConfig(directories=directories)

    config = DatasetConfig()
    with pytest.raises(ValidationError):
        config.directories = directories
    assert config.directories == []


@pytest.mark.unit
def test_single_directory_string_is_rejected():
    with pytest.raises(ValidationError, match="sequence of paths"):
        DatasetConfig(directories="images/")


# DATASET CONFIG: COLOR SPACE
@pytest.mark.unit
@pytest.mark.parametrize("color_space", ["yuv", "ycbcr", "hsv", "hls", "lab", "luv", "xyz"])
def test_supported_color_spaces(color_space):
    assert DatasetConfig(color_space=color_space).color_space == color_space


@pytest.mark.unit
def test_unknown_color_space_is_rejected():
    with pytest.raises(ValidationError, match="Unsupported color space"):
        DatasetConfig(color_space="cmyk")


@pytest.mark.unit
def test_grayscale_requires_rgb_color_space():
    with pytest.raises(ValidationError, match="needs 3 channels"):
        DatasetConfig(channels=1, color_space="lab")

    config = DatasetConfig(color_space="yuv")
    with pytest.raises(ValidationError):
        config.set_channels(1)

    assert config.channels == 3
    assert config.color_space == "yuv"

    config.set_color_space("rgb")
    config.channels = 1
    with pytest.raises(ValidationError):
        config.color_space = "lab"
    assert (config.channels, config.color_space) == (1, "rgb")


# DATASET CONFIG: DISCOVERY KEY
@pytest.mark.unit
def test_discovery_key_tracks_index_fields_only():
    config = DatasetConfig(directories=["a"])
    key = config.discovery_key()

    config.set_height(128)
    assert config.discovery_key() == key

    config.dedup_by_basename = False
    assert config.discovery_key() != key
