from __future__ import annotations

import logging

import pytest

from index.descriptors import FunctionDescriptor
from index.registry import FunctionRegistry, RegistryBuilder, RegistryFrozenError


def _descriptor(
    package: str, name: str, receiver: str = "", rel_path: str = "a.go", line: int = 1
) -> FunctionDescriptor:
    return FunctionDescriptor(
        package=package,
        receiver=receiver,
        name=name,
        path=rel_path,
        rel_path=rel_path,
        start_line=line,
        end_line=line + 2,
    )


def test_same_method_name_in_two_packages_gets_two_keys() -> None:
    registry = FunctionRegistry.from_descriptors(
        [
            _descriptor("x", "Run", receiver="Worker"),
            _descriptor("y", "Run", receiver="Worker"),
        ]
    )

    assert sorted(registry) == ["x/Worker.Run", "y/Worker.Run"]
    assert registry.lookup("x", "Run", receiver="Worker") is registry["x/Worker.Run"]


def test_function_and_method_keys_differ() -> None:
    registry = FunctionRegistry.from_descriptors(
        [_descriptor("main", "Run"), _descriptor("main", "Run", receiver="Job")]
    )

    assert set(registry) == {"main.Run", "main/Job.Run"}
    assert registry.lookup("main", "Run") is registry["main.Run"]
    assert registry.lookup("main", "Missing") is None


def test_collision_keeps_first_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    first = _descriptor("main", "Helper", rel_path="a.go", line=3)
    second = _descriptor("main", "Helper", rel_path="b.go", line=9)
    builder = RegistryBuilder()

    with caplog.at_level(logging.WARNING, logger="index.registry"):
        assert builder.add(first) is True
        assert builder.add(second) is False

    registry = builder.freeze()
    assert registry["main.Helper"] is first
    assert registry.collisions == ("main.Helper",)
    assert "Duplicate function identity main.Helper" in caplog.text


def test_freeze_closes_the_builder() -> None:
    builder = RegistryBuilder()
    builder.add(_descriptor("main", "A"))
    registry = builder.freeze()

    with pytest.raises(RegistryFrozenError):
        builder.add(_descriptor("main", "B"))

    assert list(registry) == ["main.A"]
    assert len(registry) == 1


def test_registry_is_read_only() -> None:
    registry = FunctionRegistry.from_descriptors([_descriptor("main", "A")])

    with pytest.raises(TypeError):
        registry["main.B"] = _descriptor("main", "B")  # type: ignore[index]


def test_package_names_by_import_path() -> None:
    builder = RegistryBuilder()
    builder.add_package("example.com/app/pkg/strutil", "strutil")
    registry = builder.freeze()

    assert registry.package_name_for("example.com/app/pkg/strutil") == "strutil"
    assert registry.package_name_for("example.com/app/other") is None


def test_by_file_groups_in_declaration_order() -> None:
    registry = FunctionRegistry.from_descriptors(
        [
            _descriptor("main", "B", rel_path="b.go", line=5),
            _descriptor("main", "A2", rel_path="a.go", line=10),
            _descriptor("main", "A1", rel_path="a.go", line=1),
        ]
    )

    grouped = registry.by_file()

    assert list(grouped) == ["a.go", "b.go"]
    assert [d.name for d in grouped["a.go"]] == ["A1", "A2"]


@pytest.mark.parametrize("name", ["init", "_"])
def test_repeated_init_is_not_a_collision(
    name: str, caplog: pytest.LogCaptureFixture
) -> None:
    builder = RegistryBuilder()

    with caplog.at_level(logging.DEBUG, logger="index.registry"):
        assert builder.add(_descriptor("main", name, line=3)) is True
        assert builder.add(_descriptor("main", name, line=9)) is False
        assert builder.add(_descriptor("main", name, rel_path="b.go")) is False

    registry = builder.freeze()
    assert registry.collisions == ()
    assert registry.repeated == (f"main.{name}", f"main.{name}")
    assert all(record.levelno == logging.DEBUG for record in caplog.records)


def test_init_method_still_collides() -> None:
    builder = RegistryBuilder()
    builder.add(_descriptor("main", "init", receiver="T"))
    builder.add(_descriptor("main", "init", receiver="T", line=9))

    assert builder.freeze().collisions == ("main/T.init",)
