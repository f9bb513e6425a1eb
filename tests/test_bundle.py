# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for bundle generation, caching and minification."""

from __future__ import annotations

import gzip
import io
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import parse_qs

import pytest

from pyiife.bundle import (
    BundleCache,
    BundleFormat,
    BundleGenerator,
    ClosureCompilerClient,
    GenerateOptions,
    bundle_key,
    generate,
)
from pyiife.errors import ConfigError, MinifyError, NoModulesError, SourceNotFoundError


def _sources(*names: str, debug: bool = False) -> str:
    prefix = "debug:" if debug else ""
    return "".join(f"/*{prefix}{name}*/" for name in names)


class _FakeResponse(io.BytesIO):
    def __init__(self, payload: bytes, status: int = 200) -> None:
        super().__init__(payload)
        self.status = status


class _FakeOpener:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[urllib.request.Request] = []

    def open(self, request: urllib.request.Request, timeout: float) -> _FakeResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


class _StubMinifier:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def minify(self, code: str, externs: str) -> str:
        self.calls.append((code, externs))
        return "minified"


def _install_opener(monkeypatch: pytest.MonkeyPatch, opener: _FakeOpener) -> None:
    monkeypatch.setattr(urllib.request, "build_opener", lambda *handlers: opener)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("wrap", BundleFormat.WRAP),
        (" UNARY ", BundleFormat.UNARY),
        ("none", BundleFormat.NONE),
        ("", BundleFormat.NONE),
        (None, BundleFormat.NONE),
        ("iife", BundleFormat.NONE),
    ],
)
def test_format_parse(name: str | None, expected: BundleFormat) -> None:
    assert BundleFormat.parse(name) is expected


def test_format_render() -> None:
    assert BundleFormat.NONE.render(["a", "b"]) == "ab"
    assert BundleFormat.WRAP.render(["a"]) == "(function(window){a})(window);"
    assert BundleFormat.UNARY.render(["a"]) == "!function(window){a}(window);"


def test_generate_none_format(source_root: Path) -> None:
    text = generate(["css-loader"], GenerateOptions(root_path=source_root))

    assert text == _sources("async-core", "css-loader")


def test_generate_unary_format(source_root: Path) -> None:
    text = generate(["css-loader"], GenerateOptions(root_path=source_root, format="unary"))

    assert text == "!function(window){" + _sources("async-core", "css-loader") + "}(window);"


def test_generate_wrap_format(source_root: Path) -> None:
    text = generate(["js-loader"], GenerateOptions(root_path=source_root, format="wrap"))

    assert text == "(function(window){" + _sources("async-core", "js-loader") + "})(window);"


def test_generate_debug_sources(source_root: Path) -> None:
    text = generate(["css-loader"], GenerateOptions(root_path=source_root, debug=True))

    assert text == _sources("async-core", "event-emitter", "css-loader", "debug", debug=True)


def test_unknown_format_falls_back_to_none() -> None:
    assert GenerateOptions(format="bogus").format is BundleFormat.NONE


def test_invalid_format_type() -> None:
    with pytest.raises(ValueError):
        GenerateOptions(format=3)


def test_generate_uses_cache(source_root: Path) -> None:
    cache = BundleCache()
    generator = BundleGenerator(GenerateOptions(root_path=source_root), cache=cache)

    first = generator.generate(["css-loader"])
    (source_root / "dist" / "css-loader.js").unlink()
    second = generator.generate(["css-loader"])

    assert first == second
    assert cache.info().hits == 1
    assert len(cache) == 1


def test_generate_without_cache(source_root: Path) -> None:
    cache = BundleCache()
    generator = BundleGenerator(GenerateOptions(root_path=source_root, cache=False), cache=cache)

    generator.generate(["css-loader"])

    assert len(cache) == 0


def test_generate_missing_source(source_root: Path) -> None:
    (source_root / "dist" / "timing.js").unlink()

    with pytest.raises(SourceNotFoundError):
        generate(["css-loader", "timing"], GenerateOptions(root_path=source_root))


def test_generate_resolution_error(source_root: Path) -> None:
    with pytest.raises(NoModulesError):
        generate([], GenerateOptions(root_path=source_root))


def test_generator_requires_source_root() -> None:
    with pytest.raises(ConfigError, match="no loader source root"):
        BundleGenerator(GenerateOptions())


def test_generate_compress_uses_minifier(source_root: Path) -> None:
    minifier = _StubMinifier()
    generator = BundleGenerator(
        GenerateOptions(root_path=source_root, compress=True, format="unary"),
        minifier=minifier,  # type: ignore[arg-type]
    )

    assert generator.generate(["css-loader"]) == "minified"
    assert minifier.calls == [
        ("!function(window){" + _sources("async-core", "css-loader") + "}(window);", "var Async;\n")
    ]


def test_write_returns_stats(source_root: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "bundle.js"
    generator = BundleGenerator(GenerateOptions(root_path=source_root))

    stats = generator.write(
        ["css-loader", "localstorage", "timing", "dependency", "capture", "capture-insert"],
        output,
    )

    expected = _sources(
        "async-core",
        "event-emitter",
        "css-loader",
        "regex",
        "vendor",
        "dependency",
        "cache",
        "cache-css",
        "localstorage",
        "capture",
        "capture-css",
        "capture-insert",
        "timing",
    )
    assert output.read_text(encoding="utf-8") == expected
    assert stats.modules[0] == "async-core"
    assert len(stats.modules) == 13
    assert stats.size == len(expected.encode("utf-8"))
    assert stats.gzip_size == len(gzip.compress(expected.encode("utf-8")))
    assert stats.size_kb == pytest.approx(stats.size / 1024)


def test_bundle_key_varies_with_inputs() -> None:
    base = bundle_key(["async-core"], format_name="none", compress=False, debug=False, root="/r")

    assert base == bundle_key(["async-core"], format_name="none", compress=False, debug=False, root="/r")
    assert base != bundle_key(["async-core"], format_name="wrap", compress=False, debug=False, root="/r")
    assert base != bundle_key(["async-core"], format_name="none", compress=False, debug=True, root="/r")
    assert base != bundle_key(["async-core"], format_name="none", compress=False, debug=False, root="/s")
    assert len(base) == 64


def test_cache_evicts_least_recently_used() -> None:
    cache = BundleCache(maxsize=2)
    cache.put("a", "1")
    cache.put("b", "2")
    assert cache.get("a") == "1"
    cache.put("c", "3")

    assert "a" in cache
    assert "b" not in cache
    assert cache.info().current_size == 2
    assert cache.info().hits == 1

    cache.clear()
    assert cache.info().hits == 0
    assert len(cache) == 0


def test_minify_posts_form(monkeypatch: pytest.MonkeyPatch) -> None:
    opener = _FakeOpener(_FakeResponse(b"  compiled();\n"))
    _install_opener(monkeypatch, opener)

    result = ClosureCompilerClient(url="https://compiler.test/compile").minify("code();", "var Async;")

    assert result == "compiled();"
    request = opener.requests[0]
    assert request.get_method() == "POST"
    form = parse_qs(request.data.decode("utf-8"))  # type: ignore[union-attr]
    assert form["compilation_level"] == ["ADVANCED_OPTIMIZATIONS"]
    assert form["language_out"] == ["ECMASCRIPT5"]
    assert form["js_code"] == ["code();"]
    assert form["js_externs"] == ["var Async;"]


def test_minify_non_200(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_opener(monkeypatch, _FakeOpener(_FakeResponse(b"", status=204)))

    with pytest.raises(MinifyError, match="HTTP 204"):
        ClosureCompilerClient().minify("code();", "")


def test_minify_transport_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_opener(monkeypatch, _FakeOpener(error=urllib.error.URLError("offline")))

    with pytest.raises(MinifyError, match="offline"):
        ClosureCompilerClient().minify("code();", "")


def test_minify_rejects_unsupported_scheme() -> None:
    with pytest.raises(MinifyError, match="scheme"):
        ClosureCompilerClient(url="file:///etc/passwd").minify("code();", "")
