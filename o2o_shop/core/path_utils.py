# o2o_shop/core/path_utils.py
from pathlib import Path

SHOP_IMAGE_ROOT = "upload/item/shop"


def get_shop_image_path(shop_id: int) -> str:
    """
    Relative directory holding every image of one shop.

    Example:
        get_shop_image_path(7) -> 'upload/item/shop/7/'

    The value is stored as-is in image address columns, so it always
    uses forward slashes regardless of the host OS.
    """
    return f"{SHOP_IMAGE_ROOT}/{shop_id}/"


def resolve_image_path(base_dir: str | Path, relative_path: str) -> Path:
    """
    Map a stored image address onto the local file system.

    Leading slashes are ignored so that '/upload/x.jpg' and
    'upload/x.jpg' resolve to the same file under `base_dir`.
    """
    return Path(base_dir) / relative_path.lstrip("/")
