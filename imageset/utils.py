import os
from collections.abc import Sequence

import torch
from kornia.color import (
    rgb_to_hls,
    rgb_to_hsv,
    rgb_to_luv,
    rgb_to_xyz,
    rgb_to_ycbcr,
    rgb_to_yuv,
)
from kornia.color.lab import rgb_to_lab
from torchvision import io
from torchvision.transforms import v2

from imageset.exceptions import ConfigValidationError, ImageDecodeError


def rgb_to_zero_centered_normalized_lab(
    images: torch.Tensor, split_light_and_color: bool = True
) -> torch.Tensor | tuple[torch.Tensor]:
    """Transforms an RGB image to LAB color space and normalizes
    the LAB channels between -1 to 1

    Parameters
    ----------
    images : torch.Tensor
        Batch of images in RGB Format with shape (b, c, h, w)

    split_light_and_color : bool, default=True
        If True returns a tuple of the light channel and AB channels
        concatenated, else returns a single LAB image

    Returns
    -------
    Normalized lab or tuple of light and ab channel tensors
    """
    lab_images = rgb_to_lab(images)
    light_ch = (lab_images[:, [0], :, :] / 50) - 1
    ab_ch = lab_images[:, [1, 2], :, :] / 110

    if not split_light_and_color:
        return torch.concat([light_ch, ab_ch], dim=1)
    return light_ch, ab_ch


_CONVERTERS = {
    "yuv": rgb_to_yuv,
    "ycbcr": rgb_to_ycbcr,
    "hsv": rgb_to_hsv,
    "hls": rgb_to_hls,
    "lab": rgb_to_lab,
    "luv": rgb_to_luv,
    "xyz": rgb_to_xyz,
    "lab_normalized": lambda images: rgb_to_zero_centered_normalized_lab(
        images, split_light_and_color=False
    ),
}


def list_files(directory: str) -> list[str]:
    """Lists the regular files of a directory, sorted by name

    Parameters
    ----------
    directory : str
        Directory to list, sub-directories are not descended into

    Returns
    -------
    File names (not paths) in lexicographic order
    """
    with os.scandir(directory) as entries:
        return sorted(entry.name for entry in entries if entry.is_file())


def decode_image(
    path: str, channels: int = 3, dtype: torch.dtype = torch.float32
) -> torch.Tensor:
    """Reads an image file at its native resolution

    Parameters
    ----------
    path : str
        Image file path

    channels : int, default=3
        1 loads the image as grayscale, 3 as RGB

    dtype : torch.dtype, default=torch.float32
        Floating point type of the returned tensor

    Returns
    -------
    torch.Tensor with shape (channels, h, w) and values between 0 and 1
    """
    mode = io.ImageReadMode.GRAY if channels == 1 else io.ImageReadMode.RGB
    try:
        image = io.read_image(path=path, mode=mode)
    except (RuntimeError, OSError, ValueError) as err:
        raise ImageDecodeError(path) from err
    return image.to(dtype) / 255


def resize_image(image: torch.Tensor, width: int, height: int) -> torch.Tensor:
    """Resizes an image (c, h, w) or a batch (b, c, h, w) to (height, width)"""
    return v2.Resize((height, width), antialias=True)(image)


def convert_color_space(images: torch.Tensor, color_space: str) -> torch.Tensor:
    """Converts a batch of RGB images to another color space

    Parameters
    ----------
    images : torch.Tensor
        Batch of images in RGB format with shape (b, c, h, w) and values
        between 0 and 1

    color_space : str
        Name of the target color space. "rgb" returns the batch unchanged

    Returns
    -------
    torch.Tensor with the same shape as `images`
    """
    color_space = color_space.lower()
    if color_space == "rgb":
        return images
    if color_space not in _CONVERTERS:
        raise ConfigValidationError(f"Unsupported color space '{color_space}'")
    if images.shape[1] != 3:
        raise ConfigValidationError(
            f"Color space '{color_space}' needs 3 channels, got {images.shape[1]}"
        )
    if images.shape[0] == 0:
        return images
    return _CONVERTERS[color_space](images)


def normalize_per_channel(
    images: torch.Tensor,
    mean: Sequence[float] | torch.Tensor | None = None,
    std: Sequence[float] | torch.Tensor | None = None,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Standardizes each channel of a batch in place

    Missing statistics are computed over the whole batch, per channel, so
    that the returned values can be reused to normalize other batches the
    same way.

    Parameters
    ----------
    images : torch.Tensor
        Batch of images with shape (b, c, h, w), modified in place

    mean : sequence of float, default=None
        Per-channel mean, computed from `images` if not given

    std : sequence of float, default=None
        Per-channel standard deviation, computed from `images` if not given

    Returns
    -------
    Tuple of the per-channel mean and std tensors, each with shape (c,)
    """
    channels = images.shape[1]
    if images.shape[0] == 0 and (mean is None or std is None):
        raise ValueError("Cannot compute channel statistics of an empty batch")
    per_channel = images.transpose(0, 1).flatten(start_dim=1)

    if mean is None:
        mean = per_channel.mean(dim=1)
    else:
        mean = torch.as_tensor(mean, dtype=images.dtype).expand(channels).clone()

    if std is None:
        std = per_channel.std(dim=1, correction=0).clamp_min(1e-8)
    else:
        std = torch.as_tensor(std, dtype=images.dtype).expand(channels).clone()

    images.sub_(mean.view(1, -1, 1, 1)).div_(std.view(1, -1, 1, 1))
    return mean, std
