"""Tests for the resolution orchestrator."""

import json
import logging

import pytest
from open_import_file.resolver import orchestrator as orchestrator_module
from open_import_file.resolver.cache import SnapshotCache
from open_import_file.resolver.config_loader import ConfigLoader
from open_import_file.resolver.orchestrator import ImportResolver
from open_import_file.resolver.orchestrator import get_default_resolver
from open_import_file.resolver.orchestrator import resolve_import
from open_import_file.resolver.workspace import Workspace


@pytest.fixture
def resolver(project):
    return ImportResolver(workspace=Workspace([project]))


class ExplodingSearch:
    async def find_files(self, include, exclude=None, max_results=10):
        raise RuntimeError("search backend unavailable")


class ExplodingProber:
    async def probe(self, base_path):
        raise OSError("disk on fire")


@pytest.mark.asyncio
class TestRelative:
    async def test_resolves_sibling(self, resolver, write_file):
        app = write_file("src/app.ts")
        util = write_file("src/util.ts")

        assert await resolver.resolve("./util", app) == util

    async def test_resolves_parent_directory_index(self, resolver, write_file):
        app = write_file("src/pages/home.tsx")
        index = write_file("src/components/index.ts")

        assert await resolver.resolve("../components", app) == index

    async def test_missing_never_falls_through(self, resolver, write_file):
        app = write_file("src/app.ts")
        write_file("lib/util.ts")

        assert await resolver.resolve("./util", app) is None

    async def test_requires_requesting_file(self, resolver, write_file):
        write_file("src/util.ts")

        assert await resolver.resolve("./util") is None

    async def test_quoted_spec(self, resolver, write_file):
        app = write_file("src/app.ts")
        util = write_file("src/util.ts")

        assert await resolver.resolve("'./util'", app) == util


@pytest.mark.asyncio
class TestAliased:
    async def test_tsconfig_wildcard_asset(self, resolver, project, write_tsconfig, write_file):
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["src/*"]}})
        app = write_file("src/app.ts")
        logo = write_file("src/assets/logo.svg")

        assert await resolver.resolve("@/assets/logo.svg", app) == logo

    async def test_nested_project_config(self, resolver, write_tsconfig, write_file):
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["src/*"]}})
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["lib/*"]}}, "packages/app/tsconfig.json")
        write_file("src/format.ts")
        nested = write_file("packages/app/lib/format.ts")
        source = write_file("packages/app/src/index.ts")

        assert await resolver.resolve("@/format", source) == nested

    async def test_bundler_alias_before_path_mapping(self, resolver, write_tsconfig, write_file):
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["lib/*"]}})
        write_file("webpack.config.js", "module.exports = { resolve: { alias: { '@': './src' } } };")
        write_file("lib/api.ts")
        from_bundler = write_file("src/api.ts")

        assert await resolver.resolve("@/api", write_file("index.ts")) == from_bundler

    async def test_later_candidate_used_when_first_missing(self, resolver, write_tsconfig, write_file):
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["src/*", "generated/*"]}})
        generated = write_file("generated/schema.ts")

        assert await resolver.resolve("@/schema", write_file("src/app.ts")) == generated

    async def test_malformed_bundler_config_does_not_block_paths(self, resolver, write_tsconfig, write_file):
        write_tsconfig({"baseUrl": ".", "paths": {"~/*": ["src/*"]}})
        write_file("webpack.config.js", "module.exports = { resolve: { alias: { broken: 'x' ")
        target = write_file("src/store.ts")

        assert await resolver.resolve("~/store", write_file("src/app.ts")) == target

    async def test_cache_refresh_after_ttl(self, project, write_tsconfig, write_file, clock):
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["src/*"]}})
        old = write_file("src/theme.ts")
        new = write_file("styles/theme.ts")
        app = write_file("app.ts")
        loader = ConfigLoader(cache=SnapshotCache(ttl_seconds=300, clock=clock))
        resolver = ImportResolver(workspace=Workspace([project]), loader=loader)

        assert await resolver.resolve("@/theme", app) == old
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["styles/*"]}})
        assert await resolver.resolve("@/theme", app) == old

        clock.advance(301)
        assert await resolver.resolve("@/theme", app) == new


@pytest.mark.asyncio
class TestFallbacks:
    async def test_workspace_search_by_base_name(self, resolver, write_file):
        target = write_file("src/shared/helpers.ts")

        assert await resolver.resolve("some-lib/helpers", write_file("src/app.ts")) == target

    async def test_external_package_unresolved(self, resolver, write_file):
        write_file("node_modules/lodash/lodash.js")
        write_file("node_modules/lodash/package.json", json.dumps({"main": "lodash.js"}))

        assert await resolver.resolve("lodash", write_file("src/app.ts")) is None

    async def test_idempotent(self, resolver, write_tsconfig, write_file):
        write_tsconfig({"baseUrl": ".", "paths": {"@/*": ["src/*"]}})
        app = write_file("src/app.ts")
        write_file("src/util.ts")

        assert await resolver.resolve("@/util", app) == await resolver.resolve("@/util", app)

    async def test_empty_spec(self, resolver):
        assert await resolver.resolve("") is None

    @pytest.mark.parametrize("spec", ["''", '""'])
    async def test_quoted_empty_spec(self, resolver, write_file, spec):
        write_file("README.md")
        app = write_file("src/app.ts")

        assert await resolver.resolve(spec, app) is None


@pytest.mark.asyncio
class TestErrorsAbsorbed:
    async def test_search_failure(self, project, write_file):
        resolver = ImportResolver(workspace=Workspace([project]), file_search=ExplodingSearch())

        assert await resolver.resolve("anything", write_file("src/app.ts")) is None

    async def test_probe_failure(self, project, write_file):
        write_file("src/util.ts")
        resolver = ImportResolver(workspace=Workspace([project]), prober=ExplodingProber())

        assert await resolver.resolve("./util", write_file("src/app.ts")) is None

    async def test_alias_failure_falls_through_to_search(self, project, write_file, monkeypatch):
        resolver = ImportResolver(workspace=Workspace([project]))
        target = write_file("src/widgets.ts")

        def broken_match(*args, **kwargs):
            raise ValueError("bad snapshot")

        monkeypatch.setattr(resolver.matcher, "match", broken_match)

        assert await resolver.resolve("@/widgets", write_file("src/app.ts")) == target


@pytest.mark.asyncio
class TestResolveImport:
    async def test_accepts_file_uri(self, resolver, write_file):
        app = write_file("src/app.ts")
        util = write_file("src/util.ts")

        assert await resolve_import("./util", app.as_uri(), resolver=resolver) == util

    async def test_unusable_uri_treated_as_missing(self, resolver, write_file):
        write_file("src/util.ts")

        assert await resolve_import("./util", "not a uri", resolver=resolver) is None


class TestDefaultResolver:
    @pytest.fixture(autouse=True)
    def fresh_default(self, project, monkeypatch):
        monkeypatch.chdir(project)
        monkeypatch.setattr(orchestrator_module, "_default_resolver", None)

    def test_debug_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPEN_IMPORT_FILE_DEBUG", "1")

        resolver = get_default_resolver()

        assert resolver.settings.debug is True
        assert logging.getLogger("open_import_file").level == logging.DEBUG

    def test_project_settings_applied(self, project, write_file):
        write_file(".open-import-file/settings.yaml", "resolver:\n  search_max_results: 2\n")

        resolver = get_default_resolver()

        assert resolver.workspace.folders == [project]
        assert resolver.settings.search_max_results == 2
        assert resolver.settings.debug is False

    def test_shared_between_calls(self):
        assert get_default_resolver() is get_default_resolver()
