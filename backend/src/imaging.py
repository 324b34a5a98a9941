"""Image decode/encode — Pillow in, (H, W, 3) uint8 arrays out."""

import os
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError


def load_image(path: str | os.PathLike) -> np.ndarray:
    """Decode an image file into a writable RGB array.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError:        If the file is not a decodable image.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Image not found: {path}")
    try:
        with Image.open(p) as img:
            return np.array(img.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"error decoding image {p.name}: {e}") from e


def save_image(frame: np.ndarray, path: str | os.PathLike, quality: int = 95) -> Path:
    """Encode ``frame`` to ``path``; the format follows the file extension."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    img = Image.fromarray(frame[:, :, :3])
    if p.suffix.lower() in (".jpg", ".jpeg"):
        img.save(p, quality=quality)
    else:
        img.save(p)
    return p
