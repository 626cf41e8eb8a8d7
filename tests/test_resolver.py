import asyncio

import pytest

from rulez.core.keys import K_SUGGESTIONS, SOURCE_OFFLINE, SOURCE_SYNTHETIC
from rulez.workflows import resolver as resolver_module
from rulez.workflows.catalog import DEFAULT_CATALOG, CatalogEntry
from rulez.workflows.resolver import ResolveOptions, RuleResolver, RuleResult, fetch_rule
from rulez.workflows.rules_config import DEFAULT_POLICY
from rulez.workflows.url_utils import RuleToken, extract_name_from_url
from rulez.workflows.web_fetch import FetchError, NetworkError

EMPTY_PAGE = "<html><body><div class='hero'></div></body></html>"
MARKER_PAGE = '<html><body><pre>other</pre><code class="text-sm block pr-3">Real rule text</code></body></html>'


def _fake_fetch(pages):
    """Serve ``pages`` by URL; anything else is a 404. Records every call."""

    calls = []

    async def fetch(url):
        calls.append(url)
        value = pages.get(url)
        if value is None:
            raise FetchError(url, 404, "Not Found")
        if isinstance(value, Exception):
            raise value
        return value

    fetch.calls = calls
    return fetch


def _resolve(token, options=None, pages=None, **kwargs):
    fetch = _fake_fetch(pages or {})
    resolver = RuleResolver(fetch=fetch, **kwargs)
    return asyncio.run(resolver.resolve(token, options)), fetch.calls


def test_raw_url_follows_naming_convention():
    url = DEFAULT_POLICY.raw_url("nextjs")
    assert url == "https://raw.githubusercontent.com/ivangrynenko/cursorrules/main/.cursor/rules/nextjs.mdc"


@pytest.mark.parametrize("name", ["python", "react-native", "Foo_Bar-9"])
def test_offline_bare_names(name):
    result, calls = _resolve(name, ResolveOptions(offline_mode=True))
    assert result.success
    assert result.source == SOURCE_OFFLINE
    assert result.name == name
    assert name in result.content
    assert "Simulated Offline Mode" in result.content
    assert calls == []


@pytest.mark.parametrize(
    "url",
    [
        "https://cursor.directory/react-typescript",
        "https://example.com/rules/custom.mdc",
        "https://example.com/",
    ],
)
def test_offline_urls_short_circuit(url):
    result, calls = _resolve(url, ResolveOptions(offline_mode=True, is_url=True))
    assert result.success
    assert result.name == extract_name_from_url(url)
    assert result.source == SOURCE_OFFLINE
    assert calls == []


def test_bare_name_success():
    url = DEFAULT_POLICY.raw_url("nextjs")
    result, calls = _resolve("nextjs", pages={url: "# Next.js rule"})
    assert result == RuleResult.ok("# Next.js rule", "nextjs", url)
    assert calls == [url]
    assert url.endswith("/nextjs.mdc")


def test_bare_name_failure_suggests_catalog_names():
    result, calls = _resolve("nextjs")
    assert not result.success
    assert result.name == "nextjs"
    assert calls[0].endswith("/nextjs.mdc")
    assert "nextjs" in result.suggestions
    assert "Failed to fetch content from" in result.error


def test_suggestion_match_is_reflexive_and_bidirectional():
    result, _ = _resolve("react")
    assert result.suggestions == ["react"]

    result, _ = _resolve("react-hooks")
    assert result.suggestions == ["react"]

    result, _ = _resolve("script")
    assert result.suggestions == ["typescript"]


def test_no_suggestions_is_absent():
    result, _ = _resolve("elixir")
    assert not result.success
    assert result.suggestions is None
    assert K_SUGGESTIONS not in result.to_dict()


def test_injected_catalog_drives_suggestions():
    catalog = [CatalogEntry("elixir", "Elixir", "Rules for Elixir")]
    result, _ = _resolve("elixir-phoenix", catalog=catalog)
    assert result.suggestions == ["elixir"]


def test_network_error_message_is_reported():
    url = DEFAULT_POLICY.raw_url("python")
    result, _ = _resolve("python", pages={url: NetworkError(url, OSError("dns failure"))})
    assert not result.success
    assert result.error.startswith("Network error while fetching")
    assert result.suggestions == ["python"]


def test_generic_url_is_fetched_verbatim():
    url = "https://example.com/rules/custom-rule.mdc"
    result, calls = _resolve(url, ResolveOptions(is_url=True), pages={url: "custom"})
    assert result.success
    assert result.content == "custom"
    assert result.name == "custom-rule.mdc"
    assert result.source == url
    assert calls == [url]


def test_generic_url_failure_uses_derived_name():
    url = "https://example.com/rules/react"
    result, _ = _resolve(url)
    assert not result.success
    assert result.name == "react"
    assert result.suggestions == ["react"]


def test_generic_url_blank_body_fails():
    url = "https://example.com/x"
    result, calls = _resolve(url, ResolveOptions(is_url=True), pages={url: ""})
    assert not result.success
    assert result.name == "x"
    assert result.error == f"Failed to fetch content from {url}: empty body"
    assert calls == [url]


def test_bare_name_blank_body_fails_with_suggestions():
    url = DEFAULT_POLICY.raw_url("react")
    result, _ = _resolve("react", pages={url: "  \n\t"})
    assert not result.success
    assert result.content is None
    assert result.error.endswith("empty body")
    assert result.suggestions == ["react"]


def test_part_with_blank_body_is_skipped():
    url = "https://cursor.directory/react-vue"
    react_url = DEFAULT_POLICY.raw_url("react")
    vue_url = DEFAULT_POLICY.raw_url("vue")
    pages = {url: EMPTY_PAGE, react_url: "", vue_url: "# Vue"}
    result, calls = _resolve(url, pages=pages)
    assert result.success
    assert result.content == "# Vue"
    assert result.source == vue_url
    assert calls == [url, react_url, vue_url]


def test_failure_path_rechecks_offline_mode():
    resolver = RuleResolver(fetch=_fake_fetch({}))
    token = RuleToken.from_name("python")
    exc = FetchError(DEFAULT_POLICY.raw_url("python"), 500, "Server Error")
    result = asyncio.run(resolver._fail(token, ResolveOptions(offline_mode=True), exc))
    assert result.success
    assert result.source == SOURCE_OFFLINE

    result = asyncio.run(resolver._fail(token, ResolveOptions(), exc))
    assert not result.success
    assert result.error == str(exc)


def test_caller_is_url_flag_is_trusted():
    token = "https://example.com/x"
    result, calls = _resolve(token, ResolveOptions(is_url=False))
    assert not result.success
    assert calls == [DEFAULT_POLICY.raw_url(token)]


def test_special_origin_scrape_success():
    url = "https://cursor.directory/nextjs-react"
    result, calls = _resolve(url, ResolveOptions(is_url=True), pages={url: MARKER_PAGE})
    assert result.success
    assert result.content == "Real rule text"
    assert result.name == "nextjs-react"
    assert result.source == url
    assert calls == [url]


def test_special_origin_without_dash_fails_with_extraction_error():
    url = "https://cursor.directory/python"
    result, calls = _resolve(url, pages={url: EMPTY_PAGE})
    assert not result.success
    assert "Could not extract rule content" in result.error
    assert result.name == "python"
    assert result.suggestions == ["python"]
    assert calls == [url]


def test_special_origin_synthesizes_when_every_part_fails():
    url = "https://cursor.directory/react-typescript-tooling"
    result, calls = _resolve(url, pages={url: EMPTY_PAGE})
    assert result.success
    assert result.source == SOURCE_SYNTHETIC
    assert result.name == "react-typescript-tooling"
    assert "React, Typescript, Tooling" in result.content
    assert calls == [
        url,
        DEFAULT_POLICY.raw_url("react"),
        DEFAULT_POLICY.raw_url("typescript"),
        DEFAULT_POLICY.raw_url("tooling"),
    ]


def test_special_origin_first_part_success_wins():
    url = "https://cursor.directory/react-typescript-rule"
    ts_url = DEFAULT_POLICY.raw_url("typescript")
    react_url = DEFAULT_POLICY.raw_url("react")
    pages = {url: EMPTY_PAGE, ts_url: "# TypeScript"}
    result, calls = _resolve(url, pages=pages)
    assert result.success
    assert result.content == "# TypeScript"
    assert result.name == "react-typescript-rule"
    assert result.source == ts_url
    assert calls == [url, react_url, ts_url]


def test_special_origin_fetch_failure_with_dash_falls_back():
    url = "https://cursor.directory/cursor-vue-rules"
    vue_url = DEFAULT_POLICY.raw_url("vue")
    pages = {url: NetworkError(url, OSError("offline")), vue_url: "# Vue"}
    result, calls = _resolve(url, pages=pages)
    assert result.success
    assert result.content == "# Vue"
    assert result.source == vue_url
    assert calls == [url, vue_url]


def test_special_origin_fetch_failure_without_dash_fails():
    url = "https://cursor.directory/python"
    result, calls = _resolve(url)
    assert not result.success
    assert result.error.startswith("Failed to fetch content from")
    assert calls == [url]


def test_special_origin_host_is_configurable():
    from dataclasses import replace

    policy = replace(DEFAULT_POLICY, special_origin="rules.example.org")
    url = "https://rules.example.org/go-lang"
    result, _ = _resolve(url, pages={url: EMPTY_PAGE}, policy=policy)
    assert result.source == SOURCE_SYNTHETIC


def test_catalog_failure_propagates(monkeypatch):
    async def broken_catalog(catalog=DEFAULT_CATALOG):
        raise RuntimeError("catalog unavailable")

    monkeypatch.setattr(resolver_module, "list_available_rules", broken_catalog)
    with pytest.raises(RuntimeError):
        _resolve("nextjs")


def test_result_to_dict_shapes():
    ok = RuleResult.ok("body", "react", "https://x").to_dict()
    assert ok == {"success": True, "name": "react", "content": "body", "source": "https://x"}

    failed = RuleResult.failed("boom", "react", ["react"]).to_dict()
    assert failed == {"success": False, "name": "react", "error": "boom", "suggestions": ["react"]}


def test_failed_result_normalizes_empty_suggestions():
    assert RuleResult.failed("boom", "x", []).suggestions is None


def test_fetch_rule_convenience():
    url = DEFAULT_POLICY.raw_url("python")
    result = asyncio.run(fetch_rule("python", fetch=_fake_fetch({url: "py"})))
    assert result.success
    assert result.content == "py"


def test_fetch_rule_offline_needs_no_fetcher():
    result = asyncio.run(fetch_rule("python", ResolveOptions(offline_mode=True)))
    assert result.source == SOURCE_OFFLINE
