from io import BytesIO
from typing import Tuple

import numpy as np
import numpy.typing as npt
from PIL import Image, ImageOps

# Type aliases for clarity
FloatArray = npt.NDArray[np.float32]
UInt8Array = npt.NDArray[np.uint8]


def decode_image(data: bytes) -> Image.Image:
    """Decode encoded image bytes into a fully loaded RGBA image.

    Raises ``OSError`` (``PIL.UnidentifiedImageError``) on undecodable input.
    """
    with Image.open(BytesIO(data)) as img:
        return img.convert("RGBA")


def fit_cover(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Scale and center-crop ``image`` so it fills ``size`` exactly."""
    width, height = size
    return ImageOps.fit(image, (max(1, width), max(1, height)), Image.Resampling.BILINEAR)


def apply_opacity(image: Image.Image, opacity: float) -> Image.Image:
    """
    Multiply the alpha channel by ``opacity`` (clamped to [0, 1]).
    Returns the input unchanged when fully opaque.
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    opacity = float(np.clip(opacity, 0.0, 1.0))
    if opacity >= 1.0:
        return image

    arr: UInt8Array = np.array(image, dtype=np.uint8)
    alpha: FloatArray = arr[..., 3].astype(np.float32) * np.float32(opacity)
    arr[..., 3] = np.clip(np.rint(alpha), 0, 255).astype(np.uint8)
    return Image.fromarray(arr)
