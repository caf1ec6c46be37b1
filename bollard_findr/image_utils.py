import os
from typing import Tuple, Union

from PIL import Image, ImageDraw

from .catalog import CatalogItem, is_url, resolve_asset
from .config import AppConfig

PLACEHOLDER_BG = (47, 52, 58)
PLACEHOLDER_FG = (233, 238, 244)


def resize_and_padding(img: Image.Image, size: Tuple[int, int], pad_color=(255, 255, 255)) -> Image.Image:
    """Resize keeping aspect ratio to fit within (width, height), pad to exact size."""
    target_w, target_h = size
    img = img.convert("RGB")
    w, h = img.size
    scale = min(target_w / w, target_h / h)
    new_w, new_h = max(1, int(round(w * scale))), max(1, int(round(h * scale)))
    img_r = img.resize((new_w, new_h), Image.BICUBIC)

    canvas = Image.new("RGB", (target_w, target_h), pad_color)
    left = (target_w - new_w) // 2
    top = (target_h - new_h) // 2
    canvas.paste(img_r, (left, top))
    return canvas


def placeholder_image(label: str, size: Tuple[int, int]) -> Image.Image:
    """Flat tile with the item's label, used when its asset is not on disk."""
    im = Image.new("RGB", size, PLACEHOLDER_BG)
    d = ImageDraw.Draw(im)
    left, top, right, bottom = d.textbbox((0, 0), label)
    x = (size[0] - (right - left)) // 2
    y = (size[1] - (bottom - top)) // 2
    d.text((x, y), label, fill=PLACEHOLDER_FG)
    return im


def load_item_image(item: CatalogItem, cfg: AppConfig) -> Union[str, Image.Image]:
    """
    What the gallery should display for an item: the resolved URL as is,
    a padded thumbnail for a local file, or a placeholder if the file is missing.
    """
    location = resolve_asset(item, cfg)
    size = (cfg.thumb_width, cfg.thumb_height)
    if is_url(location):
        return location
    if not os.path.isfile(location):
        return placeholder_image(item.display_label, size)
    with Image.open(location) as im:
        return resize_and_padding(im, size)
