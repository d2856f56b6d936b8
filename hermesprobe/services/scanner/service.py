"""
Pattern Scanner Service.

Searches decompiled output for HTTP client usage, models, base URLs and auth
handling. Native categories target jadx Java/Kotlin sources; JS categories
target hermes-dec pseudo-source.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator

from ...core.exceptions import DirectoryNotFoundError, InputNotFoundError
from ...core.logging import get_logger
from ...models.scan import PatternCategory, ScanMode, ScanSection

logger = get_logger(__name__)

NATIVE_CATEGORIES: tuple[PatternCategory, ...] = (
    PatternCategory(
        name="API_FILES",
        patterns=(r"@(?:GET|POST|PUT|DELETE|PATCH|HEAD)",),
        limit=100,
    ),
    PatternCategory(
        name="VOLLEY_FILES",
        patterns=(r"StringRequest", r"JsonObjectRequest", r"JsonArrayRequest", r"RequestQueue"),
    ),
    PatternCategory(
        name="OKHTTP_FILES",
        patterns=(r"Request\.Builder", r"OkHttpClient", r"\.newCall\("),
    ),
    PatternCategory(
        name="KTOR_FILES",
        patterns=(r"HttpClient", r"client\.(?:get|post|put|delete)"),
    ),
    PatternCategory(
        name="MODEL_FILES",
        patterns=(r"@SerializedName", r"@Json\(", r"@Serializable", r"@JsonProperty"),
        limit=50,
    ),
    PatternCategory(
        name="BASE_URLS",
        patterns=(r"BASE_URL", r"API_URL", r"baseUrl", r"api_base", r"\.baseUrl\("),
        limit=15,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="AUTH_PATTERNS",
        patterns=(r"Authorization", r"Bearer", r"addHeader.*[Aa]uth", r"Interceptor", r"@Header\("),
        limit=15,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="GRAPHQL_FILES",
        patterns=(r"ApolloClient", r"@GraphQL", r"graphql", r"\.query\(", r"\.mutate\("),
        limit=20,
    ),
)

JS_CATEGORIES: tuple[PatternCategory, ...] = (
    PatternCategory(
        name="API Class Definitions",
        group="methods",
        patterns=(
            r"// Original name: Api[, ]",
            r"// Original name: .*[Ss]ervice[, ]",
            r"// Original name: .*[Cc]lient[, ]",
        ),
        limit=60,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="API Method Registry",
        group="methods",
        patterns=(r"r\d*\['[a-zA-Z]*'\] = r\d",),
        anchor=r"// Original name: Api[, ]",
        window=1000,
        limit=100,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Named API Functions",
        group="methods",
        patterns=(
            r"// Original name: _?(?:get|post|create|register|update|patch|delete|remove)[A-Z]",
            r"// Original name: _?login",
        ),
        limit=200,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="HTTP Method Calls",
        group="http",
        patterns=(r"\.(?:get|post|put|patch|delete);",),
        require=r"r\d",
        limit=150,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Apisauce/Axios Usage",
        group="http",
        patterns=(r"\.apisauce", r"apisauce.*create", r"axios.*create"),
        limit=40,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Fetch API Usage",
        group="http",
        patterns=(r"\bfetch\(",),
        limit=20,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Base URL & Configuration",
        group="config",
        patterns=(r"baseURL", r"base_url", r"BASE_URL", r"config\.url", r"config\.timeout"),
        limit=40,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Hardcoded URLs",
        group="config",
        patterns=(r"https?://[a-zA-Z0-9]",),
        exclude=r"node_modules|react-native|facebook|github|google|sentry|amplitude",
        limit=30,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Authentication Patterns",
        group="auth",
        patterns=(
            r"Authorization",
            r"setHeader.*[Aa]uth",
            r"Bearer",
            r"Basic ",
            r"api[_-]?[Kk]ey",
            r"access[_-]?[Tt]oken",
            r"auth[_-]?[Tt]oken",
        ),
        limit=40,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Endpoint Path Strings",
        group="endpoints",
        patterns=(r"r\d* = '[a-z_]*/*[a-z_]*'",),
        exclude=r"r\d* = '[a-z]'|function|return|undefined|null|true|false|string|number|object",
        limit=100,
        mode=ScanMode.LINES,
    ),
    PatternCategory(
        name="Template Literal Paths",
        group="endpoints",
        patterns=(r"frames/.*/", r"users/", r"user/", r"sessions/", r"albums/"),
        limit=60,
        mode=ScanMode.LINES,
    ),
)

JS_GROUPS: tuple[str, ...] = ("methods", "http", "config", "auth", "endpoints")


def select_categories(
    categories: Iterable[PatternCategory], groups: Iterable[str] | None = None
) -> list[PatternCategory]:
    """Filter categories by group; no groups selects everything."""
    wanted = set(groups or ())
    return [c for c in categories if not wanted or c.group in wanted]


def _iter_lines(path: Path) -> Iterator[tuple[int, str]]:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for lineno, line in enumerate(f, start=1):
            yield lineno, line.rstrip("\n")


def _iter_source_files(sources_dir: Path) -> Iterator[Path]:
    for path in sorted(sources_dir.rglob("*")):
        if path.is_file():
            yield path


def scan_sources(
    sources_dir: Path,
    categories: Iterable[PatternCategory] = NATIVE_CATEGORIES,
) -> list[ScanSection]:
    """Scan a decompiled sources tree.

    Args:
        sources_dir: jadx sources/ directory
        categories: Categories to search

    Returns:
        One ScanSection per category, in category order

    Raises:
        DirectoryNotFoundError: If sources_dir does not exist
    """
    if not sources_dir.is_dir():
        raise DirectoryNotFoundError(
            message=f"Directory not found: {sources_dir}",
            path=str(sources_dir),
        )

    categories = list(categories)
    compiled = [c.compile() for c in categories]
    hits: list[list[str]] = [[] for _ in categories]
    overflow = [False] * len(categories)

    for path in _iter_source_files(sources_dir):
        matched_file = [False] * len(categories)
        try:
            for lineno, line in _iter_lines(path):
                for i, category in enumerate(categories):
                    if matched_file[i] and category.mode == ScanMode.FILES:
                        continue
                    if not category.accepts(line, compiled[i]):
                        continue
                    if category.mode == ScanMode.FILES:
                        matched_file[i] = True
                        entry = str(path)
                    else:
                        entry = f"{path}:{lineno}:{line.strip()}"
                    if len(hits[i]) < category.limit:
                        hits[i].append(entry)
                    else:
                        overflow[i] = True
        except OSError as e:
            logger.debug("Skipping unreadable file", path=str(path), error=str(e))

    sections = [
        ScanSection(name=c.name, matches=hits[i], truncated=overflow[i])
        for i, c in enumerate(categories)
    ]
    logger.info(
        "Source scan completed",
        sources=str(sources_dir),
        hits={s.name: len(s.matches) for s in sections},
    )
    return sections


def _find_anchors(js_file: Path, categories: list[PatternCategory]) -> list[int | None]:
    """First line number matching each category's anchor, None when absent or unset."""
    anchors: list[int | None] = [None] * len(categories)
    pending = {i: re.compile(c.anchor) for i, c in enumerate(categories) if c.anchor}
    if not pending:
        return anchors
    for lineno, line in _iter_lines(js_file):
        for i, pattern in list(pending.items()):
            if pattern.search(line):
                anchors[i] = lineno
                del pending[i]
        if not pending:
            break
    return anchors


def scan_js(
    js_file: Path,
    categories: Iterable[PatternCategory] = JS_CATEGORIES,
) -> list[ScanSection]:
    """Scan decompiled Hermes pseudo-source line by line.

    Args:
        js_file: hermes-dec output file
        categories: Categories to search

    Returns:
        One ScanSection per category with "lineno:text" entries

    Raises:
        InputNotFoundError: If js_file does not exist
    """
    if not js_file.is_file():
        raise InputNotFoundError(message=f"File not found: {js_file}", path=str(js_file))

    categories = list(categories)
    compiled = [c.compile() for c in categories]
    sections = [ScanSection(name=c.name) for c in categories]
    anchors = _find_anchors(js_file, categories)

    for lineno, line in _iter_lines(js_file):
        for i, category in enumerate(categories):
            if not category.in_window(lineno, anchors[i]):
                continue
            if not category.accepts(line, compiled[i]):
                continue
            section = sections[i]
            if len(section.matches) < category.limit:
                section.matches.append(f"{lineno}:{line.strip()}")
            else:
                section.truncated = True

    return sections
