"""
Batch materialization on top of the path index.

Two modes are offered:

- ``load_sequential``: the first images of the index, in index order.
- ``load_random``: a draw without replacement, in draw order.

Both decode only the selected paths, resize them to the configured
(height, width) and convert the whole batch to the configured color space.
"""

import gc
import logging
from collections.abc import Callable, Sequence

import torch
from tqdm.auto import tqdm

from imageset import utils
from imageset.batch import RandomBatch, SequentialBatch
from imageset.config import DatasetConfig
from imageset.constants import LOGGER_NAME
from imageset.dataset import ImageDataset
from imageset.index import PathIndex

logger = logging.getLogger(LOGGER_NAME)


class BatchLoader:
    """Loads batches of images from the directories of a config

    The path index is built on the first load and reused afterwards. Call
    `invalidate` after changing the directories, the extension or the
    deduplication flag of the config.

    Parameters
    ----------
    config : DatasetConfig
        Dataset settings, read at every load

    index : PathIndex, default=None
        Index to draw paths from. A new one is created from `config` if not given

    decode : Callable, default=utils.decode_image
        Called as decode(path, channels), returns a (c, h, w) float tensor

    resize : Callable, default=utils.resize_image
        Called as resize(image, width, height)

    convert_color_space : Callable, default=utils.convert_color_space
        Called as convert_color_space(batch, color_space)
    """

    def __init__(
        self,
        config: DatasetConfig,
        index: PathIndex | None = None,
        decode: Callable[[str, int], torch.Tensor] = utils.decode_image,
        resize: Callable[[torch.Tensor, int, int], torch.Tensor] = utils.resize_image,
        convert_color_space: Callable[[torch.Tensor, str], torch.Tensor] = (
            utils.convert_color_space
        ),
    ):
        self.config = config
        self.index = index if index is not None else PathIndex(config)
        self.decode = decode
        self.resize = resize
        self.convert_color_space = convert_color_space

        self.generator = torch.Generator()
        if config.seed is not None:
            self.generator.manual_seed(config.seed)
        else:
            self.generator.seed()

    def invalidate(self) -> None:
        """Forgets the cached paths so the next load rescans the directories"""
        self.index.invalidate()

    def dataset(self, paths: Sequence[str] | None = None) -> ImageDataset:
        """Torch dataset over `paths`, or over the whole index if not given"""
        return ImageDataset(
            paths=self.index.paths if paths is None else paths,
            height=self.config.height,
            width=self.config.width,
            channels=self.config.channels,
            decode=self.decode,
            resize=self.resize,
        )

    def _empty_batch(self, count: int) -> torch.Tensor:
        return torch.empty(
            (count, self.config.channels, self.config.height, self.config.width),
            dtype=torch.float32,
        )

    def _progress(self, iterable, total: int, description: str):
        return tqdm(
            iterable,
            total=total,
            desc=description,
            disable=not self.config.show_progress,
        )

    def _reclaim_memory(self, loaded: int) -> None:
        interval = self.config.gc_interval
        if interval and loaded % interval == 0:
            gc.collect()

    def load_sequential(self, start_at: int = 0, count: int = 1) -> SequentialBatch:
        """Loads images in index order

        Unless `config.honor_start_at` is set, loading always starts at the
        beginning of the index and `start_at` only gets validated. Requesting
        more images than available returns a smaller batch

        Parameters
        ----------
        start_at : int, default=0
            0-based position of the first image, see above

        count : int, default=1
            Maximum amount of images to load

        Returns
        -------
        SequentialBatch with at most `count` images
        """
        if start_at < 0:
            raise ValueError(f"start_at must be >= 0, got {start_at}")
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        paths = self.index.paths
        if self.config.honor_start_at:
            selected = paths[start_at : start_at + count]
        else:
            if start_at:
                logger.debug("Ignoring start_at=%d, sequential loads start at 0", start_at)
            selected = paths[:count]

        dataset = self.dataset(selected)
        images = self._empty_batch(len(dataset))
        for i in self._progress(range(len(dataset)), len(dataset), "Loading images"):
            images[i] = dataset[i]
            self._reclaim_memory(i + 1)

        images = self.convert_color_space(images, self.config.color_space)
        logger.debug("Loaded %d of %d requested images in index order", len(dataset), count)
        return SequentialBatch(images, selected)

    def draw(self, count: int) -> list[str]:
        """Draws up to `count` distinct paths from the index, in draw order"""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        paths = self.index.paths
        permutation = torch.randperm(len(paths), generator=self.generator)
        return [paths[position] for position in permutation[:count].tolist()]

    def load_random(self, count: int) -> RandomBatch:
        """Loads randomly drawn images, without replacement

        Every call draws a fresh permutation of the whole index. Requesting
        more images than available returns every image once, in random order

        Parameters
        ----------
        count : int
            Maximum amount of images to draw

        Returns
        -------
        RandomBatch with at most `count` images
        """
        selected = self.draw(count)
        dataset = self.dataset(selected)

        native_images = []
        for i in self._progress(range(len(dataset)), len(dataset), "Decoding images"):
            native_images.append(dataset.load_native(i))
            self._reclaim_memory(i + 1)

        images = self._empty_batch(len(native_images))
        for i, image in enumerate(native_images):
            images[i] = self.resize(image, self.config.width, self.config.height)

        images = self.convert_color_space(images, self.config.color_space)
        logger.debug("Drew %d of %d requested images", len(selected), count)
        return RandomBatch(images, selected)
