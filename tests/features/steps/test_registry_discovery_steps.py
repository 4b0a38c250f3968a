"""Behavioural tests for ecosystem registry discovery."""

from __future__ import annotations

import asyncio
import json
import re
import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from ecoregistry.common.slug import parse_repo_slug
from ecoregistry.discovery import DiscoverySettings, discover
from tests.helpers.events import RecordingEventLogger
from tests.helpers.github_api import TOKEN, FakeGitHub, make_client

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ecoregistry.registry import ReconcileResult

_QUOTED = re.compile(r'"([^"]+)"')


def run_async[T](coro: typ.Coroutine[typ.Any, typ.Any, T]) -> T:
    """Run async coroutines in sync BDD step functions."""
    return asyncio.run(coro)


class DiscoveryContext(typ.TypedDict, total=False):
    """Shared state used by BDD steps."""

    fake: FakeGitHub
    owner: str
    listed: list[str]
    asset_urls: list[str]
    registry_path: Path
    previous: dict[str, dict[str, object]]
    events: RecordingEventLogger
    result: ReconcileResult


@scenario(
    "../registry_discovery.feature",
    "Opted-in repositories are added to the registry",
)
def test_opted_in_repositories_added() -> None:
    """Behavioural test: marker repositories appear in the registry."""


@scenario(
    "../registry_discovery.feature",
    "Entries survive repositories that disappear or fail",
)
def test_entries_survive_failures() -> None:
    """Behavioural test: the registry never loses entries."""


@scenario(
    "../registry_discovery.feature",
    "Unreachable assets are recorded without a URL",
)
def test_unreachable_assets() -> None:
    """Behavioural test: unreachable assets are blanked and reported."""


@pytest.fixture
def discovery_context(tmp_path: Path) -> DiscoveryContext:
    """Provide a fresh fake GitHub and registry location per scenario."""
    return {
        "fake": FakeGitHub(),
        "listed": [],
        "asset_urls": [],
        "registry_path": tmp_path / "registry.json",
        "previous": {},
        "events": RecordingEventLogger(),
    }


def _list_repository(context: DiscoveryContext, slug: str) -> str:
    owner, name = parse_repo_slug(slug)
    if name not in context["listed"]:
        context["listed"].append(name)
    context["fake"].set_repositories("orgs", owner, context["listed"])
    return name


def _written_registry(context: DiscoveryContext) -> dict[str, dict[str, object]]:
    records = json.loads(context["registry_path"].read_text(encoding="utf-8"))
    return {record["repo"]: record for record in records}


@given(parsers.parse('an organisation "{owner}" on GitHub'))
def organisation(discovery_context: DiscoveryContext, owner: str) -> None:
    """Register the organisation and an empty repository listing."""
    discovery_context["owner"] = owner
    discovery_context["fake"].add_org(owner)
    discovery_context["fake"].set_repositories("orgs", owner, [])


@given(parsers.parse('repository "{slug}" has the marker:'))
def repository_with_marker(
    discovery_context: DiscoveryContext, slug: str, docstring: str
) -> None:
    """Serve ``docstring`` as the repository's marker file."""
    name = _list_repository(discovery_context, slug)
    owner = discovery_context["owner"]
    discovery_context["fake"].set_marker(owner, name, docstring)


@given(parsers.parse('repository "{slug}" has no marker'))
def repository_without_marker(discovery_context: DiscoveryContext, slug: str) -> None:
    """List a repository that never opted in."""
    _list_repository(discovery_context, slug)


@given(parsers.parse('repository "{slug}" fails to serve its marker'))
def repository_failing(discovery_context: DiscoveryContext, slug: str) -> None:
    """List a repository whose marker lookup errors."""
    _list_repository(discovery_context, slug)
    discovery_context["fake"].fail(f"/repos/{slug}/contents/.ecosystem.yml")


@given(
    parsers.parse(
        'repository "{slug}" publishes asset "{asset}" under release "{tag}"'
    )
)
def repository_release(
    discovery_context: DiscoveryContext, slug: str, asset: str, tag: str
) -> None:
    """Publish a release carrying ``asset``."""
    owner, name = parse_repo_slug(slug)
    url = f"https://dl.example/{slug}/{tag}/{asset}"
    discovery_context["asset_urls"].append(url)
    discovery_context["fake"].set_release(owner, name, tag, {asset: url})


@given(parsers.parse("asset downloads answer with status {status:d}"))
def asset_status(discovery_context: DiscoveryContext, status: int) -> None:
    """Answer HEAD requests for every published asset with ``status``."""
    for url in discovery_context["asset_urls"]:
        discovery_context["fake"].head_status[url] = status


@given("an empty registry")
def empty_registry(discovery_context: DiscoveryContext) -> None:
    """Start from an empty registry file."""
    discovery_context["registry_path"].write_text("[]\n", encoding="utf-8")


@given(parsers.parse("the registry already lists {slugs}"))
def existing_registry(discovery_context: DiscoveryContext, slugs: str) -> None:
    """Seed the registry with one entry per quoted slug."""
    previous = {
        slug: {
            "repo": slug,
            "package": parse_repo_slug(slug)[1],
            "language": "R",
            "release_tag": "eco-atlas",
            "asset": "atlas-pack.tgz",
            "atlas_asset_url": "",
            "role": None,
            "tags": [],
            "entrypoints": [],
            "last_updated": "2025-06-01T12:00:00.000Z",
        }
        for slug in _QUOTED.findall(slugs)
    }
    discovery_context["previous"] = previous
    discovery_context["registry_path"].write_text(
        json.dumps(list(previous.values())), encoding="utf-8"
    )


@when("discovery runs")
def run_discovery(discovery_context: DiscoveryContext) -> None:
    """Run discovery against the fake GitHub."""

    async def _run() -> ReconcileResult:
        client, http_client = make_client(discovery_context["fake"])
        settings = DiscoverySettings(
            token=TOKEN,
            owner=discovery_context["owner"],
            registry_path=discovery_context["registry_path"],
        )
        try:
            return await discover(
                settings, client, events=discovery_context["events"]
            )
        finally:
            await http_client.aclose()

    discovery_context["result"] = run_async(_run())


@then(parsers.parse("the registry lists {slugs}"))
def registry_lists(discovery_context: DiscoveryContext, slugs: str) -> None:
    """Assert the written registry holds exactly the quoted slugs."""
    written = list(_written_registry(discovery_context))
    assert written == sorted(_QUOTED.findall(slugs))


@then(parsers.parse('entry "{slug}" has language "{language}"'))
def entry_language(
    discovery_context: DiscoveryContext, slug: str, language: str
) -> None:
    """Assert the canonical language of an entry."""
    assert _written_registry(discovery_context)[slug]["language"] == language


@then(parsers.parse('entry "{slug}" has a download URL'))
def entry_has_url(discovery_context: DiscoveryContext, slug: str) -> None:
    """Assert the entry kept its reachable asset URL."""
    url = _written_registry(discovery_context)[slug]["atlas_asset_url"]
    assert url in discovery_context["asset_urls"]


@then(parsers.parse('entry "{slug}" has no download URL'))
def entry_without_url(discovery_context: DiscoveryContext, slug: str) -> None:
    """Assert the entry's asset URL was blanked."""
    assert _written_registry(discovery_context)[slug]["atlas_asset_url"] == ""


@then(parsers.parse('entry "{slug}" is unchanged from the previous registry'))
def entry_unchanged(discovery_context: DiscoveryContext, slug: str) -> None:
    """Assert a carried-forward entry matches the previous one exactly."""
    written = _written_registry(discovery_context)[slug]
    assert written == discovery_context["previous"][slug]


@then(
    parsers.parse(
        "the run reports {added:d} added, {unchanged:d} unchanged "
        "and {failed:d} failed"
    )
)
def run_counters(
    discovery_context: DiscoveryContext, added: int, unchanged: int, failed: int
) -> None:
    """Assert the reconciliation counters."""
    result = discovery_context["result"]
    assert (result.added, result.unchanged, result.failed) == (
        added,
        unchanged,
        failed,
    )


@then(parsers.parse('an unreachable asset warning is reported for "{slug}"'))
def unreachable_warning(discovery_context: DiscoveryContext, slug: str) -> None:
    """Assert the asset warning was raised for ``slug``."""
    warnings = [
        details
        for name, details in discovery_context["events"].events
        if name == "asset_unreachable"
    ]
    assert [details["repo_slug"] for details in warnings] == [slug]
