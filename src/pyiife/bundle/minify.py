# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Client for the remote Closure Compiler minification service."""

from __future__ import annotations

import logging
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Final
from urllib.parse import urlencode, urlparse

from ..errors import MinifyError

LOGGER = logging.getLogger(__name__)

DEFAULT_COMPILER_URL: Final[str] = "https://closure-compiler.appspot.com/compile"
_SUPPORTED_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})
_USER_AGENT: Final[str] = "pyiife-minify/1.0"


@dataclass(frozen=True, slots=True)
class ClosureCompilerClient:
    """Minify javascript with advanced optimisations against loader externs."""

    url: str = DEFAULT_COMPILER_URL
    timeout: float = 30.0

    def form(self, code: str, externs: str) -> dict[str, str]:
        """Return the form fields posted to the service."""

        return {
            "compilation_level": "ADVANCED_OPTIMIZATIONS",
            "warning_level": "QUIET",
            "language": "ECMASCRIPT6",
            "language_out": "ECMASCRIPT5",
            "js_externs": externs,
            "js_code": code,
            "output_info": "compiled_code",
        }

    def minify(self, code: str, externs: str) -> str:
        """Return ``code`` minified by the remote service.

        Args:
            code: Javascript bundle to compile.
            externs: Extern declarations protecting the public loader API.

        Returns:
            str: Compiled code with surrounding whitespace stripped.

        Raises:
            MinifyError: If the service is unreachable or answers with a non-200 status.
        """

        parsed = urlparse(self.url)
        if parsed.scheme.lower() not in _SUPPORTED_SCHEMES:
            raise MinifyError(f"Unsupported minifier URL scheme '{parsed.scheme}'")
        body = urlencode(self.form(code, externs)).encode("utf-8")
        request = urllib.request.Request(
            self.url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/x-www-form-urlencoded; charset=utf-8",
                "User-Agent": _USER_AGENT,
            },
        )
        opener = urllib.request.build_opener(urllib.request.HTTPSHandler(context=ssl.create_default_context()))
        LOGGER.debug("minifying %d bytes via %s", len(body), self.url)
        try:
            with opener.open(request, timeout=self.timeout) as response:
                status = response.status
                payload = response.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            raise MinifyError(f"minifier responded with HTTP {exc.code}") from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise MinifyError(f"minifier request failed: {exc}") from exc
        if status != 200:
            raise MinifyError(f"minifier responded with HTTP {status}")
        return payload.strip()


__all__ = ["ClosureCompilerClient", "DEFAULT_COMPILER_URL"]
