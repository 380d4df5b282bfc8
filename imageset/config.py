"""
Dataset configuration.

``DatasetConfig`` stays mutable: assigning a field re-runs validation, so
attribute assignment and the ``set_*`` helpers are the configuration setters.
A ``PathIndex`` snapshots the discovery fields when it builds, therefore a
change made after the build only takes effect once the index is invalidated.
"""

import os
from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from imageset.constants import COLOR_SPACES, DEFAULT_GC_INTERVAL


class DatasetConfig(BaseModel):
    """Settings shared by the path index and the batch loader

    Attributes
    ----------
    directories : list[str]
        Directories to scan, in priority order for basename deduplication

    file_extension : str
        Case-sensitive suffix a file name must end with

    dedup_by_basename : bool
        Load a basename only once, from the first directory containing it

    height, width : int
        Output spatial dimensions of every image

    channels : int
        1 for grayscale, 3 for color

    color_space : str
        Target color space applied to each batch after resizing

    honor_start_at : bool
        If True, sequential loads start at ``start_at``. Otherwise they always
        start at the beginning of the index

    seed : int, default=None
        Seed for the random draw generator

    gc_interval : int
        Call the garbage collector every ``gc_interval`` decoded images, 0 disables

    show_progress : bool
        Display a progress bar while decoding a batch
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    directories: list[str] = Field(default_factory=list, description="Directories to scan")
    file_extension: str = Field(default="jpg", min_length=1, description="File name suffix")
    dedup_by_basename: bool = Field(default=True, description="Skip repeated basenames")

    height: int = Field(default=16, gt=0, description="Target image height")
    width: int = Field(default=32, gt=0, description="Target image width")
    channels: Literal[1, 3] = Field(default=3, description="1=grayscale, 3=color")
    color_space: str = Field(default="rgb", description="Target color space")

    honor_start_at: bool = Field(default=False, description="Offset sequential loads")
    seed: int | None = Field(default=None, description="Random draw seed")
    gc_interval: int = Field(default=DEFAULT_GC_INTERVAL, ge=0, description="GC hint period")
    show_progress: bool = Field(default=False, description="Progress bar while decoding")

    @field_validator("directories", mode="before")
    @classmethod
    def _coerce_directories(cls, value):
        if isinstance(value, (str, os.PathLike)):
            raise ValueError("directories must be a sequence of paths, not a single path")
        if not isinstance(value, Iterable):
            raise ValueError(
                f"directories must be a sequence of paths, got {type(value).__name__}"
            )
        return [os.fspath(directory) for directory in value]

    @field_validator("color_space")
    @classmethod
    def _check_color_space(cls, value: str) -> str:
        value = value.lower()
        if value not in COLOR_SPACES:
            raise ValueError(f"Unsupported color space '{value}', expected one of {COLOR_SPACES}")
        return value

    @model_validator(mode="after")
    def _check_channels_match_color_space(self) -> "DatasetConfig":
        if self.channels == 1 and self.color_space != "rgb":
            raise ValueError(
                f"Color space '{self.color_space}' needs 3 channels, grayscale only supports 'rgb'"
            )
        return self

    def __setattr__(self, name, value):
        # Validate the whole config first so a rejected value is never stored
        if name in type(self).model_fields:
            type(self).model_validate({**self.model_dump(), name: value})
        super().__setattr__(name, value)

    def set_directories(self, directories: list[str]) -> None:
        self.directories = directories

    def set_file_extension(self, file_extension: str) -> None:
        self.file_extension = file_extension

    def set_height(self, height: int) -> None:
        self.height = height

    def set_width(self, width: int) -> None:
        self.width = width

    def set_channels(self, channels: int) -> None:
        self.channels = channels

    def set_color_space(self, color_space: str) -> None:
        self.color_space = color_space

    def discovery_key(self) -> tuple[tuple[str, ...], str, bool]:
        """Fields that determine the content of a path index"""
        return tuple(self.directories), self.file_extension, self.dedup_by_basename
