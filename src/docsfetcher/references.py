"""Package reference detection in free text.

Recognises import / require / use style statements across several language
syntaxes and pulls out the referenced package name. Used by the
``detect_package`` tool to decide which library to fetch docs for.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Language tag → resolver ecosystem tag
_LANGUAGE_ECOSYSTEMS: dict[str, str] = {
    "javascript": "npm",
    "python": "pypi",
    "csharp": "nuget",
    "php": "packagist",
    "ruby": "rubygems",
    "rust": "crates",
    "go": "go",
}

# Tried in order; a match whose specifier is relative or built-in falls
# through to later patterns. Each pattern captures group "package".
REFERENCE_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("javascript", re.compile(r"import\s+.+?\s+from\s+['\"](?P<package>[^'\"]+)['\"]")),
    ("go", re.compile(r"^\s*import\s+\"(?P<package>[^\"]+)\"\s*$", re.MULTILINE)),
    ("javascript", re.compile(r"import\s+['\"](?P<package>[^'\"]+)['\"]")),
    ("javascript", re.compile(r"require\s*\(\s*['\"](?P<package>[^'\"]+)['\"]\s*\)")),
    ("python", re.compile(r"^\s*from\s+(?P<package>[A-Za-z_][\w.]*)\s+import\b", re.MULTILINE)),
    ("csharp", re.compile(r"^\s*using\s+(?P<package>[A-Za-z_][\w.]*)\s*;", re.MULTILINE)),
    ("python", re.compile(r"^\s*import\s+(?P<package>[A-Za-z_][\w.]*)", re.MULTILINE)),
    # Ruby before PHP: a bare `require "x"` without a semicolon is Ruby
    ("ruby", re.compile(r"^\s*require\s+['\"](?P<package>[^'\"]+)['\"]\s*$", re.MULTILINE)),
    (
        "php",
        re.compile(
            r"\b(?:include|require)(?:_once)?\s*\(?\s*['\"](?P<package>[^'\"]+)['\"]\s*\)?\s*;"
        ),
    ),
    ("rust", re.compile(r"^\s*(?:pub\s+)?use\s+(?P<package>[A-Za-z_]\w*(?:::[\w{}*, ]+)*)", re.MULTILINE)),
]

_BUILTIN_ROOTS = frozenset({"std", "core", "self", "super", "crate", "System"})


@dataclass(frozen=True)
class PackageReference:
    package: str
    language: str

    @property
    def ecosystem(self) -> str | None:
        return ecosystem_for_language(self.language)


def ecosystem_for_language(language: str) -> str | None:
    return _LANGUAGE_ECOSYSTEMS.get(language.lower())


def detect_package_reference(text: str) -> PackageReference | None:
    """Return the first package referenced in ``text``, or None.

    Relative specifiers (``./util``) and language built-ins are ignored. A
    line rejected that way is not re-read under another language's syntax.
    """
    rejected_lines: set[int] = set()
    for language, pattern in REFERENCE_PATTERNS:
        for match in pattern.finditer(text):
            line = text.count("\n", 0, match.start("package"))
            if line in rejected_lines:
                continue
            package = _root_package(match.group("package").strip(), language)
            if package:
                return PackageReference(package=package, language=language)
            rejected_lines.add(line)
    return None


def _root_package(specifier: str, language: str) -> str | None:
    if not specifier or specifier.startswith((".", "/")):
        return None

    if language == "javascript":
        if specifier.startswith("node:"):
            return None
        segments = specifier.split("/")
        # Scoped packages keep their scope: @types/node
        if specifier.startswith("@") and len(segments) > 1:
            return "/".join(segments[:2])
        return segments[0]

    if language == "go":
        # Standard library import paths have no domain: "fmt", "net/http"
        return specifier if "." in specifier.split("/")[0] else None

    if language == "python":
        package = specifier.split(".")[0]
    elif language == "rust":
        package = specifier.split("::")[0]
    elif language == "php":
        package = specifier.split("/")[0].removesuffix(".php")
    else:
        package = specifier

    if package.split(".")[0] in _BUILTIN_ROOTS:
        return None
    return package or None
