"""Seed URL resolution.

Pure business logic: maps a package name plus an ecosystem tag to the
package's registry page, and derives a subject name back from a URL. No
network access, no knowledge of AppState or MCP.
"""

from __future__ import annotations

from urllib.parse import quote, urlparse

import structlog

log = structlog.get_logger()

DEFAULT_ECOSYSTEM = "npm"

# ecosystem → registry page template
ECOSYSTEM_URLS: dict[str, str] = {
    "npm": "https://www.npmjs.com/package/{name}",
    "pypi": "https://pypi.org/project/{name}",
    "maven": "https://mvnrepository.com/artifact/{name}",
    "nuget": "https://www.nuget.org/packages/{name}",
    "rubygems": "https://rubygems.org/gems/{name}",
    "packagist": "https://packagist.org/packages/{name}",
    "crates": "https://crates.io/crates/{name}",
    "go": "https://pkg.go.dev/{name}",
    "cocoapods": "https://cocoapods.org/pods/{name}",
}

# alias (lowercase) → ecosystem
ECOSYSTEM_ALIASES: dict[str, str] = {
    "javascript": "npm",
    "js": "npm",
    "typescript": "npm",
    "ts": "npm",
    "node": "npm",
    "nodejs": "npm",
    "python": "pypi",
    "py": "pypi",
    "java": "maven",
    "dotnet": "nuget",
    ".net": "nuget",
    "csharp": "nuget",
    "c#": "nuget",
    "ruby": "rubygems",
    "gem": "rubygems",
    "rubygem": "rubygems",
    "php": "packagist",
    "composer": "packagist",
    "rust": "crates",
    "cargo": "crates",
    "crate": "crates",
    "golang": "go",
    "swift": "cocoapods",
}

# Registry URL prefixes; the package name is the next path segment
_REGISTRY_MARKERS: tuple[str, ...] = (
    "npmjs.com/package/",
    "pypi.org/project/",
    "nuget.org/packages/",
    "rubygems.org/gems/",
    "packagist.org/packages/",
    "crates.io/crates/",
    "pkg.go.dev/",
    "cocoapods.org/pods/",
    "mvnrepository.com/artifact/",
)

_GENERIC_HOST_LABELS = frozenset({"www", "docs", "doc", "api", "developer", "developers", "wiki"})


def normalise_ecosystem(tag: str | None) -> str | None:
    """Return the canonical ecosystem for ``tag``, or None if unknown."""
    if tag is None:
        return None
    tag = tag.strip().lower()
    if tag in ECOSYSTEM_URLS:
        return tag
    return ECOSYSTEM_ALIASES.get(tag)


def resolve_seed_url(package: str, ecosystem: str | None = None) -> str:
    """Build the registry page URL for ``package``.

    Total over its inputs: a missing or unrecognised ecosystem falls back to
    npm instead of failing.
    """
    canonical = normalise_ecosystem(ecosystem)
    if canonical is None:
        if ecosystem:
            log.info("resolver_unknown_ecosystem", ecosystem=ecosystem, fallback=DEFAULT_ECOSYSTEM)
        canonical = DEFAULT_ECOSYSTEM
    # Scoped npm names and maven group/artifact ids keep their slash
    name = quote(package.strip(), safe="@/.:")
    return ECOSYSTEM_URLS[canonical].format(name=name)


def is_url(text: str) -> bool:
    parsed = urlparse(text.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def subject_from_url(url: str) -> str:
    """Derive the library name a documentation URL is about.

    Registry pages yield the package name, GitHub URLs the repository name,
    anything else the first meaningful host label
    (``https://docs.pydantic.dev/latest/`` → ``pydantic``).
    """
    for marker in _REGISTRY_MARKERS:
        if marker in url:
            tail = url.split(marker, 1)[1].split("?")[0].split("#")[0]
            segments = tail.split("/")
            if marker == "pkg.go.dev/":
                # Go module paths end in the package name: github.com/gin-gonic/gin
                names = [segment for segment in segments if segment]
                if names:
                    return names[-1]
                continue
            if segments[0].startswith("@") and len(segments) > 1 and segments[1]:
                return f"{segments[0]}/{segments[1]}"
            if segments[0]:
                return segments[0]

    parsed = urlparse(url)
    hostname = (parsed.hostname or "").lower()

    if hostname in ("github.com", "www.github.com"):
        segments = [segment for segment in parsed.path.split("/") if segment]
        if len(segments) >= 2:
            return segments[1]

    labels = [label for label in hostname.split(".")[:-1] if label]
    for label in labels:
        if label not in _GENERIC_HOST_LABELS:
            return label
    return hostname or url
