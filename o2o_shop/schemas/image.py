# o2o_shop/schemas/image.py
from sqlmodel import SQLModel


class ImageHolder(SQLModel):
    """
    Raw upload handed to the image storage: file bytes + original filename.

    Transient only; consumed once and never persisted.
    """

    image_bytes: bytes
    image_name: str
