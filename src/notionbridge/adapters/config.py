"""Field mapping configuration for entity adapters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from notionbridge.adapters.codecs import FieldCodec


@dataclass(frozen=True)
class FieldMapping:
    """Binds a domain key to a Notion property name and its codec."""

    domain_key: str
    wire_name: str
    codec: FieldCodec


AdapterConfig = dict[str, FieldMapping]


def make_config_from_annotations(
    wire_names: Mapping[str, str],
    codecs: Mapping[str, FieldCodec],
) -> AdapterConfig:
    """Pair each annotated domain key with its codec.

    Parameters
    ----------
    wire_names:
        Domain key to Notion property name, e.g. ``{"name": "Title"}``.
    codecs:
        Domain key to codec.  Extra keys are ignored.

    Raises
    ------
    ValueError
        When a key in *wire_names* has no codec.
    """
    config: AdapterConfig = {}
    for key, wire_name in wire_names.items():
        codec = codecs.get(key)
        if codec is None:
            raise ValueError(f"Missing codec for key: {key}")
        config[key] = FieldMapping(domain_key=key, wire_name=wire_name, codec=codec)
    return config
