"""Décodage et réduction des avatars avec Pillow."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

THUMBNAIL_SIZE = 120


class AvatarDecodeError(ValueError):
    """Erreur levée lorsque les octets reçus ne forment pas une image lisible."""


def make_thumbnail(data: bytes, size: int = THUMBNAIL_SIZE) -> Image.Image:
    """Décode une image et la réduit pour tenir dans un carré ``size`` x ``size``."""
    if not data:
        raise AvatarDecodeError("Image vide.")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise AvatarDecodeError("Image illisible.") from exc

    image = image.convert("RGBA")
    image.thumbnail((size, size), Image.LANCZOS)
    return image
