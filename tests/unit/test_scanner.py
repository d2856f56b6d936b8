"""Unit tests for the pattern scanner."""

import pytest

from hermesprobe.core.exceptions import DirectoryNotFoundError, InputNotFoundError
from hermesprobe.models.scan import PatternCategory, ScanMode
from hermesprobe.services.scanner import (
    JS_CATEGORIES,
    NATIVE_CATEGORIES,
    scan_js,
    scan_sources,
    select_categories,
)

RETROFIT_API = """\
package com.example.api;

public interface UserApi {
    @GET("users/{id}")
    Call<User> getUser(@Path("id") String id);

    @POST("users")
    Call<User> createUser(@Body User user);
}
"""

CLIENT_CONFIG = """\
package com.example.net;

public final class Client {
    static final String BASE_URL = "https://api.example.com/";
    OkHttpClient client = new OkHttpClient.Builder()
        .addInterceptor(chain -> chain.proceed(chain.request().newBuilder()
            .header("Authorization", "Bearer " + token).build()))
        .build();
}
"""

HERMES_JS = """\
r1 = function() { // Original name: Api, environment: r2
r3['getUsers'] = r4;
r5 = function() { // Original name: getUsers, environment: r6
r7 = r8.get;
r9 = 'users';
r10 = 'https://api.example.com/v1';
r11 = 'https://github.com/facebook/react-native';
r12 = fetch(r13);
r14 = 'Bearer ' + r15;
"""


@pytest.fixture
def sources_dir(temp_dir):
    root = temp_dir / "sources"
    (root / "com/example/api").mkdir(parents=True)
    (root / "com/example/net").mkdir(parents=True)
    (root / "com/example/api/UserApi.java").write_text(RETROFIT_API)
    (root / "com/example/net/Client.java").write_text(CLIENT_CONFIG)
    return root


@pytest.fixture
def js_file(temp_dir):
    path = temp_dir / "index.js"
    path.write_text(HERMES_JS)
    return path


def _by_name(sections):
    return {s.name: s for s in sections}


class TestScanSources:
    """Tests for native source scanning."""

    def test_sections_in_category_order(self, sources_dir):
        sections = scan_sources(sources_dir)
        assert [s.name for s in sections] == [c.name for c in NATIVE_CATEGORIES]

    def test_file_mode_lists_each_file_once(self, sources_dir):
        sections = _by_name(scan_sources(sources_dir))
        assert sections["API_FILES"].matches == [str(sources_dir / "com/example/api/UserApi.java")]
        assert sections["OKHTTP_FILES"].matches == [str(sources_dir / "com/example/net/Client.java")]
        assert sections["VOLLEY_FILES"].is_empty

    def test_line_mode_includes_location(self, sources_dir):
        sections = _by_name(scan_sources(sources_dir))
        client = sources_dir / "com/example/net/Client.java"
        assert sections["BASE_URLS"].matches == [
            f'{client}:4:static final String BASE_URL = "https://api.example.com/";'
        ]
        assert any("Authorization" in m for m in sections["AUTH_PATTERNS"].matches)

    def test_limit_truncates(self, temp_dir):
        root = temp_dir / "src"
        root.mkdir()
        (root / "A.java").write_text("BASE_URL\n" * 5)
        category = PatternCategory(name="B", patterns=("BASE_URL",), limit=2, mode=ScanMode.LINES)
        section = scan_sources(root, [category])[0]
        assert len(section.matches) == 2
        assert section.truncated

    def test_missing_directory(self, temp_dir):
        with pytest.raises(DirectoryNotFoundError):
            scan_sources(temp_dir / "missing")


class TestScanJs:
    """Tests for Hermes pseudo-source scanning."""

    def test_api_class_and_registry(self, js_file):
        sections = _by_name(scan_js(js_file))
        assert sections["API Class Definitions"].matches == [
            "1:r1 = function() { // Original name: Api, environment: r2"
        ]
        assert sections["API Method Registry"].matches == ["2:r3['getUsers'] = r4;"]
        assert sections["Named API Functions"].matches[0].startswith("3:")

    def test_http_and_fetch(self, js_file):
        sections = _by_name(scan_js(js_file))
        assert sections["HTTP Method Calls"].matches == ["4:r7 = r8.get;"]
        assert sections["Fetch API Usage"].matches == ["8:r12 = fetch(r13);"]

    def test_hardcoded_urls_exclude_framework_hosts(self, js_file):
        sections = _by_name(scan_js(js_file))
        assert sections["Hardcoded URLs"].matches == ["6:r10 = 'https://api.example.com/v1';"]

    def test_endpoint_strings(self, js_file):
        sections = _by_name(scan_js(js_file))
        assert "5:r9 = 'users';" in sections["Endpoint Path Strings"].matches

    def test_select_categories_by_group(self):
        auth_only = select_categories(JS_CATEGORIES, ["auth"])
        assert [c.name for c in auth_only] == ["Authentication Patterns"]
        assert select_categories(JS_CATEGORIES, None) == list(JS_CATEGORIES)

    def test_missing_file(self, temp_dir):
        with pytest.raises(InputNotFoundError):
            scan_js(temp_dir / "missing.js")


class TestMethodRegistryWindow:
    """The method registry search is anchored on the Api class when one exists."""

    def test_bindings_before_api_class_are_ignored(self, temp_dir):
        js = temp_dir / "index.js"
        js.write_text(
            "r1['render'] = r2;\n"
            "r3 = function() { // Original name: Api, environment: r4\n"
            "r5['getUsers'] = r6;\n"
        )
        sections = _by_name(scan_js(js, select_categories(JS_CATEGORIES, ["methods"])))
        assert sections["API Method Registry"].matches == ["3:r5['getUsers'] = r6;"]

    def test_without_api_class_whole_file_is_searched(self, temp_dir):
        js = temp_dir / "index.js"
        js.write_text("r1['render'] = r2;\nr5['getUsers'] = r6;\n")
        sections = _by_name(scan_js(js))
        assert sections["API Method Registry"].matches == [
            "1:r1['render'] = r2;",
            "2:r5['getUsers'] = r6;",
        ]

    def test_window_bounds_the_search(self, temp_dir):
        js = temp_dir / "index.js"
        js.write_text("ANCHOR\nhit one\nhit two\nhit three\n")
        category = PatternCategory(
            name="Near", group="methods", patterns=("hit",), anchor="ANCHOR", window=2, mode=ScanMode.LINES
        )
        section = scan_js(js, [category])[0]
        assert section.matches == ["2:hit one", "3:hit two"]
