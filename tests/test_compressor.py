# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for dictionary-indexed configuration compression."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from pyiife.compressor import (
    ConfigCompressor,
    compress_config,
    compress_to_json,
    normalize_base,
    parse_config,
)
from pyiife.vocabulary import VocabularyIndex

BASE = "https://domain.com/"

STYLES = [
    "https://domain.com/test1.css",
    {
        "href": "https://domain.com/test2.css",
        "load_timing": "domReady",
        "exec_timing": {"type": "lazy", "config": ".element-in-view"},
    },
]


@pytest.fixture
def compressor(vocabulary: VocabularyIndex) -> ConfigCompressor:
    return ConfigCompressor(vocabulary)


def test_simple_href(sample_root: Path) -> None:
    assert compress_to_json({"href": "test.css"}, root_path=sample_root) == '{"4":"test.css"}'


def test_array_with_global_base(sample_root: Path) -> None:
    compressed = compress_to_json(STYLES, global_base=BASE, root_path=sample_root)

    assert compressed == '["test1.css",{"4":"test2.css","48":54,"60":{"2":62,"89":".element-in-view"}}]'


def test_full_loader_config(sample_root: Path) -> None:
    config = [
        *STYLES,
        "https://domain.com/test.js",
        {"src": "test-dep.js", "ref": "dep"},
        {
            "src": "https://domain.com/test2.js",
            "load_timing": {"type": "requestAnimationFrame", "frame": 4},
            "exec_timing": {"type": "requestIdleCallback"},
            "dependencies": "dep",
            "attributes": {"data-custom-attr": "test"},
        },
    ]

    compressed = compress_to_json(config, global_base=BASE, root_path=sample_root)

    assert compressed == (
        '["test1.css",{"4":"test2.css","48":54,"60":{"2":62,"89":".element-in-view"}},"test.js",'
        '{"5":"test-dep.js","16":"dep"},'
        '{"5":"test2.js","14":{"data-custom-attr":"test"},"15":"dep","48":{"2":52,"56":4},"60":{"2":53}}]'
    )


def test_json_text_input(sample_root: Path) -> None:
    assert compress_to_json('{"href": "test.css"}', root_path=sample_root) == '{"4":"test.css"}'


def test_plain_string_passes_through(compressor: ConfigCompressor) -> None:
    assert compressor.compress("https://domain.com/a.css", global_base="https://domain.com") == "a.css"
    assert compressor.compress("not json") == "not json"


def test_null_normalises_to_empty_list(compressor: ConfigCompressor) -> None:
    assert compressor.compress(None) == []
    assert compressor.compress({"href": None, "list": [None, 1]}) == {"4": [], "list": [[], 1]}


def test_falsy_scalars_unchanged(compressor: ConfigCompressor) -> None:
    assert compressor.compress({"async": False, "delay": 0, "media": ""}) == {"0": False, "64": 0, "1": ""}


def test_opaque_keys_are_not_recursed(compressor: ConfigCompressor) -> None:
    config = {"proxy": {"href": "a.css", "type": "lazy"}, "attributes": {"type": None}}

    assert compressor.compress(config) == {
        "26": {"href": "a.css", "type": "lazy"},
        "14": {"type": None},
    }


def test_literal_value_keys(compressor: ConfigCompressor) -> None:
    config = {"match": "lazy", "search": "type", "replace": "href", "method": "lazy"}

    assert compressor.compress(config) == {"24": "lazy", "22": "type", "23": "href", "55": 62}


def test_source_tokens(compressor: ConfigCompressor) -> None:
    assert compressor.compress({"source": "xhr"}) == {"31": 36}
    assert compressor.compress({"source": ["cors", "other"]}) == {"31": [37, "other"]}
    assert compressor.compress({"source": {"type": "cssText"}}) == {"31": {"2": 38}}


def test_missing_source_token_is_left_unchanged() -> None:
    compressor = ConfigCompressor(VocabularyIndex.from_groups({"config": ["source"]}))

    assert compressor.compress({"source": "xhr"}) == {"0": "xhr"}


def test_global_base_applies_at_every_depth(compressor: ConfigCompressor) -> None:
    config = [[{"href": "https://domain.com/deep.css", "url": "https://domain.com/x"}, "https://domain.com/y"]]

    assert compressor.compress(config, global_base=BASE) == [[{"4": "deep.css", "28": "https://domain.com/x"}, "y"]]


def test_base_only_strips_prefix(compressor: ConfigCompressor) -> None:
    assert compressor.compress({"href": "https://other.com/https://domain.com/a"}, global_base=BASE) == {
        "4": "https://other.com/https://domain.com/a"
    }


def test_input_is_not_mutated(compressor: ConfigCompressor) -> None:
    config = copy.deepcopy(STYLES)

    compressor.compress(config, global_base=BASE)

    assert config == STYLES


def test_secondary_config_merge(compressor: ConfigCompressor) -> None:
    merged = compressor.compress(["a.css"], ["b.js", {"src": "c.js"}])

    assert merged == [["a.css"], 0, 0, 0, "b.js", {"5": "c.js"}]


def test_secondary_scalar_occupies_slot_four(compressor: ConfigCompressor) -> None:
    assert compressor.compress({"href": "a.css"}, '{"src": "b.js"}') == [{"4": "a.css"}, 0, 0, 0, {"5": "b.js"}]


def test_secondary_empty_list(compressor: ConfigCompressor) -> None:
    assert compressor.compress(["a.css"], []) == [["a.css"], 0, 0, 0]


def test_secondary_uses_global_base(compressor: ConfigCompressor) -> None:
    merged = compressor.compress(["https://domain.com/a.css"], ["https://domain.com/b.js"], BASE)

    assert merged == [["a.css"], 0, 0, 0, "b.js"]


def test_drop_empty_capture(compressor: ConfigCompressor) -> None:
    config = ["a.css", {"href": "b.css"}, [], {"capture": True}, "c.js"]

    assert compressor.compress(config, drop_empty_capture=True) == ["a.css", {"4": "b.css"}, "c.js"]
    assert compressor.compress(config) == ["a.css", {"4": "b.css"}, [], {"69": True}, "c.js"]


def test_drop_empty_capture_removes_empty_slot_one(compressor: ConfigCompressor) -> None:
    config = ["a.css", None, None, None, "c.js"]

    assert compressor.compress(config, drop_empty_capture=True) == ["a.css", "c.js"]


def test_drop_empty_capture_keeps_populated_capture(compressor: ConfigCompressor) -> None:
    config = ["a.css", {}, [{"match": "x"}], {}]

    assert compressor.compress(config, drop_empty_capture=True) == ["a.css", {}, [{"24": "x"}], {}]


def test_drop_empty_capture_only_top_level(compressor: ConfigCompressor) -> None:
    config = [["a", "b", [], "d"]]

    assert compressor.compress(config, drop_empty_capture=True) == [["a", "b", [], "d"]]


def test_unknown_keys_pass_through() -> None:
    compressor = ConfigCompressor(VocabularyIndex())

    assert compressor.compress({"href": "a", "nested": [{"x": None}]}) == {"href": "a", "nested": [{"x": []}]}


def test_compression_is_stable(compressor: ConfigCompressor) -> None:
    once = compressor.compress(STYLES, global_base=BASE)

    assert compressor.compress(once) == once


def test_compress_config_with_root(source_root: Path) -> None:
    assert compress_config({"href": "a.css"}, root_path=source_root) == {"4": "a.css"}


def test_json_orders_numeric_keys_first(sample_root: Path) -> None:
    text = compress_to_json({"zeta": 1, "href": "a", "type": "lazy", "10": "x", "01": "y"}, root_path=sample_root)

    assert list(json.loads(text)) == ["2", "4", "10", "zeta", "01"]


def test_json_keeps_unicode(sample_root: Path) -> None:
    assert compress_to_json({"name": "naïve"}, root_path=sample_root) == '{"3":"naïve"}'


def test_parse_config() -> None:
    assert parse_config('[1, "a"]') == [1, "a"]
    assert parse_config("{broken") == "{broken"
    assert parse_config({"a": 1}) == {"a": 1}


@pytest.mark.parametrize(
    ("base", "expected"),
    [(None, None), ("", None), ("https://a.com", "https://a.com/"), ("https://a.com/", "https://a.com/")],
)
def test_normalize_base(base: str | None, expected: str | None) -> None:
    assert normalize_base(base) == expected
