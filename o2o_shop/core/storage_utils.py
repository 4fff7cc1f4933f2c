# o2o_shop/core/storage_utils.py
import io
import logging
import random
import shutil
from datetime import datetime
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from o2o_shop.core.config import get_settings
from o2o_shop.core.exceptions import ImageProcessingError
from o2o_shop.core.path_utils import resolve_image_path
from o2o_shop.schemas.image import ImageHolder

logger = logging.getLogger(__name__)

# Pillow format per file extension; anything else is stored as JPEG.
FORMAT_BY_EXT: dict[str, str] = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".webp": "WEBP",
    ".gif": "GIF",
}

WATERMARK_OPACITY = 0.25


def get_file_extension(filename: str) -> str:
    """
    Return the lowercase extension of `filename`, including the dot.

    Unknown or missing extensions fall back to '.jpg'.
    """
    ext = Path(filename or "").suffix.lower()
    return ext if ext in FORMAT_BY_EXT else ".jpg"


def generate_filename(ext: str) -> str:
    """
    Generate a random filename: current time (yyyyMMddHHmmss) + 5 random digits.

    Args:
        ext: File extension with dot (e.g. ".png")

    Returns:
        A filename like "2024010112000012345.png"
    """
    stamp = datetime.now().strftime("%Y%m%d%H%M%S")
    return f"{stamp}{random.randint(10000, 99999)}{ext}"


class ImageStorage:
    """
    Local file system store for product images.

    - Resizes uploads with Pillow (thumbnail or gallery size).
    - Optionally stamps a watermark in the bottom-right corner.
    - Returns paths relative to `base_dir`; those are what the
      database stores.
    """

    def __init__(
        self,
        base_dir: str | Path,
        thumbnail_size: tuple[int, int] = (200, 200),
        normal_size: tuple[int, int] = (337, 640),
        thumbnail_quality: int = 80,
        normal_quality: int = 90,
        watermark_path: str | None = None,
    ):
        self.base_dir = Path(base_dir)
        self.thumbnail_size = thumbnail_size
        self.normal_size = normal_size
        self.thumbnail_quality = thumbnail_quality
        self.normal_quality = normal_quality
        self.watermark_path = watermark_path

    # ----- Public API -----

    def generate_thumbnail(self, holder: ImageHolder, dest_dir: str) -> str:
        """
        Store a resized thumbnail under `dest_dir` and return its relative path.
        """
        return self._store(holder, dest_dir, self.thumbnail_size, self.thumbnail_quality)

    def generate_normal_image(self, holder: ImageHolder, dest_dir: str) -> str:
        """
        Store a gallery image under `dest_dir` and return its relative path.
        """
        return self._store(holder, dest_dir, self.normal_size, self.normal_quality)

    def delete_file_or_path(self, path: str) -> None:
        """
        Delete a stored file, or a whole directory when `path` is one.
        No-op if nothing exists at `path`.
        """
        target = resolve_image_path(self.base_dir, path)
        if target.is_dir():
            shutil.rmtree(target)
            logger.info("Deleted image directory %s", target)
        elif target.exists():
            target.unlink()
            logger.info("Deleted image file %s", target)
        else:
            logger.debug("Nothing to delete at %s", target)

    def resolve(self, path: str) -> Path:
        return resolve_image_path(self.base_dir, path)

    # ----- Helpers -----

    def _store(
        self,
        holder: ImageHolder,
        dest_dir: str,
        size: tuple[int, int],
        quality: int,
    ) -> str:
        ext = get_file_extension(holder.image_name)
        fmt = FORMAT_BY_EXT[ext]
        img = self._decode(holder)
        img.thumbnail(size, Image.Resampling.LANCZOS)
        img = self._apply_watermark(img)
        if fmt == "JPEG" and img.mode != "RGB":
            img = self._flatten(img)

        relative_addr, target = self._unused_target(dest_dir, ext)
        target.parent.mkdir(parents=True, exist_ok=True)
        img.save(target, format=fmt, quality=quality)

        logger.debug("Stored image %s", target)
        return relative_addr

    @staticmethod
    def _decode(holder: ImageHolder) -> Image.Image:
        """
        Load the uploaded bytes into a detached, upright Pillow image.

        Only decoding errors become ImageProcessingError; disk errors
        while saving are left to the caller.
        """
        try:
            with Image.open(io.BytesIO(holder.image_bytes)) as source:
                source.load()
                return ImageOps.exif_transpose(source)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            logger.error("Failed to decode image %s: %s", holder.image_name, e)
            raise ImageProcessingError(f"Invalid image '{holder.image_name}': {e}")

    def _unused_target(self, dest_dir: str, ext: str) -> tuple[str, Path]:
        """Pick a generated filename that does not exist yet under `dest_dir`."""
        while True:
            relative_addr = dest_dir.rstrip("/") + "/" + generate_filename(ext)
            target = self.resolve(relative_addr)
            if not target.exists():
                return relative_addr, target

    @staticmethod
    def _flatten(img: Image.Image) -> Image.Image:
        """Paste transparent images onto a white background for JPEG output."""
        if img.mode == "P":
            img = img.convert("RGBA")
        if img.mode in ("RGBA", "LA"):
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        return img.convert("RGB")

    def _apply_watermark(self, img: Image.Image) -> Image.Image:
        if not self.watermark_path or not Path(self.watermark_path).is_file():
            return img

        with Image.open(self.watermark_path) as mark:
            mark = mark.convert("RGBA")
            if mark.width > img.width or mark.height > img.height:
                mark.thumbnail((img.width, img.height), Image.Resampling.LANCZOS)
            alpha = mark.getchannel("A").point(lambda a: int(a * WATERMARK_OPACITY))
            mark.putalpha(alpha)

            base = img.convert("RGBA")
            position = (base.width - mark.width, base.height - mark.height)
            base.alpha_composite(mark, dest=position)
            return base


@lru_cache
def get_image_storage() -> ImageStorage:
    """
    FastAPI dependency returning the configured ImageStorage (cached).
    """
    settings = get_settings()
    return ImageStorage(
        base_dir=settings.IMAGE_BASE_DIR,
        thumbnail_size=settings.THUMBNAIL_SIZE,
        normal_size=settings.NORMAL_IMAGE_SIZE,
        thumbnail_quality=settings.THUMBNAIL_QUALITY,
        normal_quality=settings.NORMAL_IMAGE_QUALITY,
        watermark_path=settings.WATERMARK_PATH,
    )
