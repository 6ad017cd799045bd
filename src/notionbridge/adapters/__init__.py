"""Typed record adapters built from per-field codecs."""

from notionbridge.adapters.base import DecodeResult, EntityAdapter
from notionbridge.adapters.blog import BLOG_PROPERTIES, BlogArticleAdapter
from notionbridge.adapters.codecs import (
    BooleanFromCheckbox,
    Codec,
    DateFromNotionDate,
    EmailFromEmail,
    FieldCodec,
    FirstUrlFromFiles,
    MultiSelectFromMultiSelect,
    NumberFromFormula,
    NumberFromNumber,
    PeopleIdsFromPeople,
    PlainTextFromRichText,
    PlainTextFromTitle,
    RelationIdsFromRelation,
    SelectFromSelect,
    UrlFromUrl,
    UrlListFromFiles,
    format_validation_error,
)
from notionbridge.adapters.config import AdapterConfig, FieldMapping, make_config_from_annotations
from notionbridge.adapters.registry import KINDS, Kind, get_adapter, has_adapter, list_adapters

__all__ = [
    "AdapterConfig",
    "BLOG_PROPERTIES",
    "BlogArticleAdapter",
    "BooleanFromCheckbox",
    "Codec",
    "DateFromNotionDate",
    "DecodeResult",
    "EmailFromEmail",
    "EntityAdapter",
    "FieldCodec",
    "FieldMapping",
    "FirstUrlFromFiles",
    "KINDS",
    "Kind",
    "MultiSelectFromMultiSelect",
    "NumberFromFormula",
    "NumberFromNumber",
    "PeopleIdsFromPeople",
    "PlainTextFromRichText",
    "PlainTextFromTitle",
    "RelationIdsFromRelation",
    "SelectFromSelect",
    "UrlFromUrl",
    "UrlListFromFiles",
    "format_validation_error",
    "get_adapter",
    "has_adapter",
    "list_adapters",
    "make_config_from_annotations",
]
