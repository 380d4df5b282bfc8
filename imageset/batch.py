import operator
from collections.abc import Sequence

import torch

from imageset import utils


class ImageBatch:
    """Fixed-size, read-only collection of images returned by one load

    Parameters
    ----------
    data : torch.Tensor
        Images with shape (count, channels, height, width)

    paths : Sequence[str]
        Source file of every image, in the same order as `data`
    """

    def __init__(self, data: torch.Tensor, paths: Sequence[str]):
        if data.shape[0] != len(paths):
            raise ValueError(
                f"Batch holds {data.shape[0]} images but {len(paths)} source paths"
            )
        self._data = data
        self._paths = tuple(paths)

    @property
    def data(self) -> torch.Tensor:
        return self._data

    @property
    def paths(self) -> tuple[str, ...]:
        return self._paths

    def size(self) -> int:
        """Number of images actually loaded, may be less than requested"""
        return len(self._paths)

    def __len__(self) -> int:
        return self.size()

    def __getitem__(self, index: int) -> torch.Tensor:
        index = operator.index(index)
        if not -self.size() <= index < self.size():
            raise IndexError(f"Batch index {index} out of range for size {self.size()}")
        return self._data[index]

    def __iter__(self):
        return iter(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size()}, shape={tuple(self._data.shape)})"


class SequentialBatch(ImageBatch):
    """Images taken from a contiguous range of the path index"""


class RandomBatch(ImageBatch):
    """Images drawn at random, without replacement, from the path index"""

    def normalize(
        self,
        mean: Sequence[float] | torch.Tensor | None = None,
        std: Sequence[float] | torch.Tensor | None = None,
    ) -> tuple[torch.Tensor, torch.Tensor]:
        """Standardizes the batch in place, channel by channel

        Parameters
        ----------
        mean : sequence of float, default=None
            Per-channel mean. Computed from this batch if not given

        std : sequence of float, default=None
            Per-channel standard deviation. Computed from this batch if not given

        Returns
        -------
        Tuple (mean, std) used for the normalization, so a training batch's
        statistics can be applied to later batches
        """
        return utils.normalize_per_channel(self._data, mean, std)
