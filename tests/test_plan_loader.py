from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from tstit.core.errors import PlanDiscoveryError, PlanLoadError, UnsupportedExecutor
from tstit.plan.loader import discover_plan_files, load_plan, parse_plan


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_load_toml_plan(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path / "create.toml",
        """
        [in]
        method = "post"
        url = "/users"
        body = '{"name":"$USER"}'

        [out.expect]
        code = "0"
        data = ">0"

        [out.assign]
        data = "$NEWID"
        """,
    )
    plan = load_plan(plan_path)
    assert plan.input.method == "POST"
    assert plan.input.url == "/users"
    assert plan.input.body == '{"name":"$USER"}'
    assert plan.plan.executor == "curl"
    assert list(plan.output.expect.items()) == [("code", "0"), ("data", ">0")]
    assert plan.output.assign == {"data": "$NEWID"}
    assert plan.source == plan_path
    assert plan.identifier() == str(plan_path)


def test_load_yaml_plan_with_defaults(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path / "get.yaml",
        """
        in:
          url: /users/$NEWID
        out:
          expect:
            name: alice
        """,
    )
    plan = load_plan(plan_path)
    assert plan.input.method == "GET"
    assert plan.input.body is None
    assert plan.output.assign == {}


def test_json_alias_and_exec_alias(tmp_path: Path) -> None:
    plan_path = _write(
        tmp_path / "alias.toml",
        """
        [in]
        method = "PUT"
        url = "/users/1"
        json = '{"a":1}'

        [plan]
        exec = "curl"

        [out]
        expect = { data = "1" }
        """,
    )
    plan = load_plan(plan_path)
    assert plan.input.body == '{"a":1}'
    assert plan.plan.executor == "curl"


def test_scalar_expectations_are_coerced_to_strings() -> None:
    plan = parse_plan({"in": {"url": "/"}, "out": {"expect": {"code": 0, "active": True, "ratio": 0.5}}})
    assert plan.output.expect == {"code": "0", "active": "true", "ratio": "0.5"}


def test_unknown_executor_rejected_at_load_time() -> None:
    with pytest.raises(UnsupportedExecutor):
        parse_plan({"in": {"url": "/"}, "plan": {"executor": "wget"}, "out": {"expect": {}}})


def test_empty_executor_defaults_to_curl() -> None:
    plan = parse_plan({"in": {"url": "/"}, "plan": {"executor": ""}, "out": {"expect": {}}})
    assert plan.plan.executor == "curl"


def test_unknown_method_rejected() -> None:
    with pytest.raises(PlanLoadError) as exc:
        parse_plan({"in": {"url": "/", "method": "FETCH"}, "out": {"expect": {}}})
    assert "FETCH" in str(exc.value)


def test_unparseable_file(tmp_path: Path) -> None:
    plan_path = _write(tmp_path / "broken.toml", "[in\nurl = ")
    with pytest.raises(PlanLoadError):
        load_plan(plan_path)


def test_discovery_is_recursive_sorted_and_filtered(tmp_path: Path) -> None:
    _write(tmp_path / "b" / "02.toml", "")
    _write(tmp_path / "b" / "01.yml", "")
    _write(tmp_path / "a.yaml", "")
    _write(tmp_path / "notes.txt", "")
    _write(tmp_path / "c" / "deep" / "x.toml", "")
    found = discover_plan_files([tmp_path])
    assert [p.relative_to(tmp_path).as_posix() for p in found] == [
        "a.yaml",
        "b/01.yml",
        "b/02.toml",
        "c/deep/x.toml",
    ]


def test_discovery_keeps_argument_order(tmp_path: Path) -> None:
    second = _write(tmp_path / "z.toml", "")
    first = _write(tmp_path / "a.toml", "")
    assert discover_plan_files([second, first]) == [second, first]


def test_discovery_missing_path(tmp_path: Path) -> None:
    with pytest.raises(PlanDiscoveryError):
        discover_plan_files([tmp_path / "missing"])
