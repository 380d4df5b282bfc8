from pathlib import Path

import numpy as np
import pytest
from PIL import Image

_rng = np.random.default_rng(0)


def write_image(path: Path, height: int = 20, width: int = 24, color=None) -> Path:
    """Writes an RGB image, random noise unless a solid color is given"""
    path.parent.mkdir(parents=True, exist_ok=True)
    if color is None:
        pixels = _rng.integers(0, 255, (height, width, 3), dtype=np.uint8)
    else:
        pixels = np.full((height, width, 3), color, dtype=np.uint8)
    Image.fromarray(pixels).save(path)
    return path


@pytest.fixture
def image_dirs(tmp_path: Path) -> list[str]:
    """Two directories, five unique jpg basenames and one duplicate"""
    write_image(tmp_path / "a" / "cat_1.jpg", 20, 24)
    write_image(tmp_path / "a" / "dog_1.jpg", 48, 30)
    write_image(tmp_path / "a" / "notes.txt.png", 8, 8)
    write_image(tmp_path / "b" / "cat_1.jpg", 12, 12)
    write_image(tmp_path / "b" / "cat_2.jpg", 33, 17)
    write_image(tmp_path / "b" / "dog_2.jpg", 16, 64)
    write_image(tmp_path / "b" / "eel_1.jpg", 25, 25)
    return [str(tmp_path / "a"), str(tmp_path / "b")]
