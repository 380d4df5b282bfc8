from collections.abc import Callable, Sequence

import torch
from torch.utils.data import Dataset

from imageset import utils


class ImageDataset(Dataset):
    """Torch dataset for loading images from their file paths

    Images are decoded with the requested amount of channels, scaled
    between 0 and 1 and resized to a fixed (height, width). No color space
    conversion happens here, it is applied to whole batches instead

    Parameters
    ----------
    paths : Sequence[str]
        Images file paths

    height : int
        Height of every returned image

    width : int
        Width of every returned image

    channels : int, default=3
        1 decodes images as grayscale, 3 as RGB

    decode : Callable, default=utils.decode_image
        Called as decode(path, channels) and returns a (c, h, w) tensor

    resize : Callable, default=utils.resize_image
        Called as resize(image, width, height)
    """

    def __init__(
        self,
        paths: Sequence[str],
        height: int,
        width: int,
        channels: int = 3,
        decode: Callable[[str, int], torch.Tensor] = utils.decode_image,
        resize: Callable[[torch.Tensor, int, int], torch.Tensor] = utils.resize_image,
    ):
        self.paths = list(paths)
        self.height = height
        self.width = width
        self.channels = channels
        self.decode = decode
        self.resize = resize

    def __len__(self):
        """Total images paths added to the dataset

        Returns
        -------
        Total images available
        """
        return len(self.paths)

    def load_native(self, index: int) -> torch.Tensor:
        """Decodes an image without resizing it"""
        return self.decode(self.paths[index], self.channels)

    def __getitem__(self, index):
        """gets an image from the dataset, resized to (height, width)

        Parameters
        ----------
        index : int
            Index of the file path of an image for the total available images
            in `self.paths`

        Returns
        -------
        torch.Tensor with shape (channels, height, width)
        """
        return self.resize(self.load_native(index), self.width, self.height)
