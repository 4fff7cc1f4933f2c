import re

import pytest
from PIL import Image

from o2o_shop.core import storage_utils
from o2o_shop.core.exceptions import ImageProcessingError
from o2o_shop.core.path_utils import get_shop_image_path, resolve_image_path
from o2o_shop.core.storage_utils import (
    ImageStorage,
    generate_filename,
    get_file_extension,
)
from o2o_shop.schemas.image import ImageHolder


class TestPathUtils:
    def test_shop_image_path_is_deterministic(self):
        assert get_shop_image_path(7) == "upload/item/shop/7/"
        assert get_shop_image_path(7) == get_shop_image_path(7)
        assert get_shop_image_path(7) != get_shop_image_path(8)

    def test_resolve_ignores_leading_slash(self, tmp_path):
        assert resolve_image_path(tmp_path, "/upload/a.jpg") == tmp_path / "upload" / "a.jpg"
        assert resolve_image_path(tmp_path, "upload/a.jpg") == tmp_path / "upload" / "a.jpg"


class TestFilenames:
    def test_extension_is_lowercased(self):
        assert get_file_extension("Cake.PNG") == ".png"

    def test_unknown_extension_falls_back_to_jpg(self):
        assert get_file_extension("noext") == ".jpg"
        assert get_file_extension("weird.bmpx") == ".jpg"

    def test_generated_name_is_timestamp_plus_five_digits(self):
        name = generate_filename(".png")
        assert re.fullmatch(r"\d{14}\d{5}\.png", name)


class TestImageStorage:
    def test_thumbnail_is_resized_into_shop_dir(self, storage, make_holder):
        holder = make_holder("tea.png", size=(800, 600))

        addr = storage.generate_thumbnail(holder, get_shop_image_path(7))

        assert addr.startswith("upload/item/shop/7/")
        assert addr.endswith(".png")
        with Image.open(storage.resolve(addr)) as img:
            assert img.width <= 200 and img.height <= 200

    def test_normal_image_uses_gallery_size(self, storage, make_holder):
        holder = make_holder("tea.jpg", size=(1200, 1200), fmt="JPEG")

        addr = storage.generate_normal_image(holder, get_shop_image_path(3))

        with Image.open(storage.resolve(addr)) as img:
            assert img.width <= 337 and img.height <= 640
            assert img.format == "JPEG"

    def test_transparent_image_can_be_stored_as_jpeg(self, storage, make_holder):
        holder = make_holder("logo.jpg", fmt="PNG", mode="RGBA")

        addr = storage.generate_thumbnail(holder, "upload/item/shop/1/")

        with Image.open(storage.resolve(addr)) as img:
            assert img.mode == "RGB"

    def test_watermark_is_applied(self, tmp_path, make_holder):
        mark_path = tmp_path / "watermark.png"
        Image.new("RGBA", (20, 20), (255, 255, 255, 255)).save(mark_path)
        storage = ImageStorage(base_dir=tmp_path / "images", watermark_path=str(mark_path))

        addr = storage.generate_thumbnail(make_holder("a.png", size=(100, 100)), "upload/x/")

        with Image.open(storage.resolve(addr)) as img:
            corner = img.convert("RGB").getpixel((99, 99))
            plain = img.convert("RGB").getpixel((0, 0))
        assert corner != plain

    def test_invalid_bytes_raise(self, storage):
        holder = ImageHolder(image_bytes=b"not an image", image_name="bad.png")

        with pytest.raises(ImageProcessingError):
            storage.generate_thumbnail(holder, "upload/item/shop/1/")

    def test_taken_filename_is_not_overwritten(self, storage, make_holder, monkeypatch):
        names = iter(["same.png", "same.png", "other.png"])
        monkeypatch.setattr(storage_utils, "generate_filename", lambda ext: next(names))

        first = storage.generate_normal_image(make_holder(), "upload/item/shop/1/")
        second = storage.generate_normal_image(make_holder(), "upload/item/shop/1/")

        assert first == "upload/item/shop/1/same.png"
        assert second == "upload/item/shop/1/other.png"
        assert storage.resolve(first).is_file()
        assert storage.resolve(second).is_file()

    def test_disk_error_is_not_reported_as_bad_image(self, storage, make_holder, monkeypatch):
        def full_disk(self, *args, **kwargs):
            raise OSError("No space left on device")

        holder = make_holder()
        monkeypatch.setattr(Image.Image, "save", full_disk)

        with pytest.raises(OSError, match="No space left"):
            storage.generate_thumbnail(holder, "upload/item/shop/1/")

    def test_delete_file(self, storage, make_holder):
        addr = storage.generate_thumbnail(make_holder(), "upload/item/shop/1/")
        assert storage.resolve(addr).is_file()

        storage.delete_file_or_path(addr)

        assert not storage.resolve(addr).exists()

    def test_delete_directory(self, storage, make_holder):
        storage.generate_thumbnail(make_holder(), "upload/item/shop/2/")
        storage.generate_normal_image(make_holder(), "upload/item/shop/2/")

        storage.delete_file_or_path("upload/item/shop/2/")

        assert not storage.resolve("upload/item/shop/2/").exists()

    def test_delete_missing_path_is_noop(self, storage):
        storage.delete_file_or_path("upload/item/shop/404/nothing.jpg")
