"""
Metadata document schemas.

These mirror the remote API's ``get-latest`` response. Every field is
optional: a missing field means "no opinion", never "clear this field".
Unknown keys sent by newer API versions are ignored.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_DOCUMENT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    frozen=True,
)


class MetadataImage(BaseModel):
    """An image or icon reference."""

    model_config = _DOCUMENT_CONFIG

    url: str
    alt: str | None = None
    width: int | None = None
    height: int | None = None
    mime_type: str | None = None


class OpenGraph(BaseModel):
    model_config = _DOCUMENT_CONFIG

    title: str | None = None
    description: str | None = None
    locale: str | None = None
    site_name: str | None = None
    type: str | None = None
    image: MetadataImage | None = None
    images: list[MetadataImage] | None = None


class Twitter(BaseModel):
    """Twitter card fields. Cards only carry one image; see ``primary_image``."""

    model_config = _DOCUMENT_CONFIG

    card: str | None = None
    title: str | None = None
    description: str | None = None
    image: MetadataImage | None = None
    images: list[MetadataImage] | None = None

    @property
    def primary_image(self) -> MetadataImage | None:
        if self.image is not None:
            return self.image
        if self.images:
            return self.images[0]
        return None


class CustomTag(BaseModel):
    model_config = _DOCUMENT_CONFIG

    name: str
    content: str


class MetadataDocument(BaseModel):
    """Page-level metadata for one path, as returned by the remote service."""

    model_config = _DOCUMENT_CONFIG

    title: str | None = None
    description: str | None = None
    favicon: MetadataImage | None = None
    icon: list[MetadataImage] | None = None
    apple_touch_icon: list[MetadataImage] | None = None
    open_graph: OpenGraph | None = None
    twitter: Twitter | None = None
    noindex: bool | None = None
    custom_tags: list[CustomTag] | None = None


class MetadataApiResponse(BaseModel):
    """Body of a successful ``get-latest`` call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    metadata: MetadataDocument | None = None
    status: str | None = None
    message: str | None = None
