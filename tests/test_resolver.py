import pytest

from deploywatch.domain.watch import (
    ServiceConfig,
    ServiceMetadata,
    SingleTarget,
    Unmatched,
    build_catalog,
    resolve,
)


@pytest.fixture
def catalog(metadata):
    return build_catalog(metadata)


@pytest.mark.parametrize(
    "path, name",
    [
        ("/svc/src/index.js", "hello"),
        ("/svc/src/index.ts", "hello"),
        ("/svc/src/index.js.map", "hello"),
        ("src/index.js", "hello"),
        ("/svc/src/users/api.py", "users"),
        ("/svc/jobs/worker.go", "jobs"),
    ],
)
def test_target_source_paths(catalog, path, name):
    assert resolve(path, catalog) == SingleTarget(name)


def test_every_target_resolves_from_its_source_path(catalog):
    for target in catalog.targets:
        assert resolve(target.source_path + ".js", catalog) == SingleTarget(target.name)


def test_config_path(catalog):
    assert resolve("/svc/serverless.yml", catalog) == ServiceConfig()


def test_relative_config_path_against_absolute_catalog(catalog):
    assert resolve("serverless.yml", catalog) == ServiceConfig()


def test_config_override(metadata):
    catalog = build_catalog(metadata, config_override="serverless.dev.yml")

    assert resolve("/svc/serverless.dev.yml", catalog) == ServiceConfig()
    assert resolve("/svc/serverless.yml", catalog) == Unmatched()


def test_dot_relative_config_override(metadata):
    catalog = build_catalog(metadata, config_override="./serverless.dev.yml")

    assert resolve("/svc/serverless.dev.yml", catalog) == ServiceConfig()
    assert resolve("serverless.dev.yml", catalog) == ServiceConfig()


def test_absolute_path_matches_source_path_not_handler_path():
    metadata = ServiceMetadata(
        service_dir="/work/handler-demo",
        functions={"hello": "handler.hello"},
    )
    catalog = build_catalog(metadata)

    assert resolve("/work/handler-demo/serverless.yml", catalog) == ServiceConfig()
    assert resolve("/work/handler-demo/handler.js", catalog) == SingleTarget("hello")


def test_handler_name_inside_extra_directory_is_unmatched():
    metadata = ServiceMetadata(
        service_dir="/svc",
        functions={"api": "index.handler"},
        watch_extras=("lib",),
    )
    catalog = build_catalog(metadata)

    assert resolve("/svc/lib/index.js", catalog) == Unmatched()
    assert resolve("/svc/index.js", catalog) == SingleTarget("api")


@pytest.mark.parametrize(
    "path",
    ["/svc/README.md", "/svc/lib/util.js", "/svc/shared/config.json", "/svc/src/other.js"],
)
def test_unmatched(catalog, path):
    assert resolve(path, catalog) == Unmatched()


def test_targets_win_over_config():
    metadata = ServiceMetadata(
        service_dir="/svc",
        functions={"conf": "serverless.handler"},
    )
    catalog = build_catalog(metadata)

    assert resolve("/svc/serverless.yml", catalog) == SingleTarget("conf")


def test_overlapping_prefixes_first_match_wins():
    metadata = ServiceMetadata(
        service_dir="/svc",
        functions={"short": "src/api.handler", "long": "src/api_v2.handler"},
    )
    catalog = build_catalog(metadata)

    assert resolve("/svc/src/api_v2.js", catalog) == SingleTarget("short")


def test_scoped_catalog_sends_everything_else_to_unmatched(metadata):
    catalog = build_catalog(metadata, scope_filter="hello")

    assert resolve("/svc/src/index.js", catalog) == SingleTarget("hello")
    assert resolve("/svc/src/users/api.py", catalog) == Unmatched()


def test_concrete_scenario():
    metadata = ServiceMetadata(
        service_dir="",
        functions={"hello": "src/index.handler"},
        config_filename="serverless.yml",
    )
    catalog = build_catalog(metadata)

    assert resolve("src/index.js", catalog) == SingleTarget("hello")
    assert resolve("serverless.yml", catalog) == ServiceConfig()
    assert resolve("README.md", catalog) == Unmatched()
