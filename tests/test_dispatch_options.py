import pytest

from deploywatch.domain.watch import DispatchOptions


def test_for_function_injects_flags_without_touching_receiver():
    base = DispatchOptions.from_cli(stage="dev")

    first = base.for_function("hello")
    second = base.for_function("users")

    assert (first.function, first.force, first.update_config) == ("hello", True, False)
    assert second.function == "users"
    assert base.function is None
    assert base.force is False
    assert dict(first.user_options) == {"stage": "dev"}


def test_user_options_are_copied_and_read_only():
    raw = {"stage": "dev", "region": None}
    options = DispatchOptions(user_options=raw)
    raw["stage"] = "prod"

    assert dict(options.user_options) == {"stage": "dev"}
    with pytest.raises(TypeError):
        options.user_options["stage"] = "prod"


def test_service_argv_forwards_whitelisted_options_only():
    options = DispatchOptions.from_cli(
        stage="dev", config="serverless.dev.yml", region="eu-west-1", verbose=True
    )

    assert options.service_argv() == [
        "deploy", "--force",
        "--stage", "dev",
        "--config", "serverless.dev.yml",
        "--verbose",
    ]


def test_service_argv_without_options():
    assert DispatchOptions().service_argv() == ["deploy", "--force"]


def test_service_argv_keeps_scope_filter():
    options = DispatchOptions.from_cli(function="hello")

    assert options.service_argv() == ["deploy", "--force", "--function", "hello"]


def test_function_argv():
    options = DispatchOptions.from_cli(
        stage="dev", region="eu-west-1", function="scoped", verbose=True
    ).for_function("hello")

    assert options.function_argv() == [
        "deploy", "function", "--function", "hello", "--force",
        "--stage", "dev",
        "--region", "eu-west-1",
        "--verbose",
    ]


def test_function_argv_requires_function():
    with pytest.raises(ValueError):
        DispatchOptions().function_argv()


def test_to_dict_reports_injected_flags():
    options = DispatchOptions.from_cli(stage="dev").for_function("hello")

    assert options.to_dict() == {
        "stage": "dev",
        "force": True,
        "function": "hello",
        "update-config": False,
    }
