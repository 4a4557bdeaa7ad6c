"""Tests for dir2src.generator."""

from __future__ import annotations

from pathlib import Path

import pytest

from dir2src import generator as generator_module
from dir2src import scanner as scanner_module
from dir2src.config import GeneratorConfig
from dir2src.filesystem import InputReadError, OutputWriteError
from dir2src.generator import DuplicateSymbolError, Generator
from dir2src.naming import SanitizationError
from tests._fixtures.cpp_text import (
    CLOSE_PATTERN,
    EXTERN_PATTERN,
    OPEN_PATTERN,
    assert_balanced,
    declared_length,
    extract_array_body,
    namespace_events,
    parse_byte_body,
)
from tests._fixtures.tree_builder import TreeBuilder


def test_end_to_end_two_directories(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"a/f1.bin": bytes([1, 2, 255]), "b/f2.bin": b""})

    result = tree_builder.generate(root_namespace="Game")

    f1 = tree_builder.read_output("a/f1.bin.cpp")
    f2 = tree_builder.read_output("b/f2.bin.cpp")
    header = tree_builder.read_output("bin.h")

    assert "std::array<uint8_t, 3> f1_bin = {" in f1
    assert "    001, 002, 255" in f1
    assert namespace_events(f1) == ["+Game", "+a", "-a", "-Game"]
    assert "std::array<uint8_t, 0> f2_bin = {};" in f2
    assert namespace_events(f2) == ["+Game", "+b", "-b", "-Game"]

    assert namespace_events(header) == ["+Game", "+a", "-a", "+b", "-b", "-Game"]
    assert EXTERN_PATTERN.findall(header) == [("3", "f1_bin"), ("0", "f2_bin")]

    assert result.header_path == Path(str(tree_builder.output) + "/bin.h")
    assert [module.declaration.qualified_name for module in result.modules] == ["a::f1_bin", "b::f2_bin"]
    assert [module.path.name for module in result.modules] == ["f1.bin.cpp", "f2.bin.cpp"]


@pytest.mark.parametrize("size", [0, 12, 11, 13, 23, 25, 36, 37])
def test_round_trip_lengths_and_bytes(tree_builder: TreeBuilder, size: int) -> None:
    data = bytes((index * 91 + 3) % 256 for index in range(size))
    tree_builder.write({"blob.dat": data})

    tree_builder.generate()

    module = tree_builder.read_output("blob.dat.cpp")
    header = tree_builder.read_output("bin.h")
    assert declared_length(module) == size
    assert parse_byte_body(extract_array_body(module)) == data
    assert EXTERN_PATTERN.findall(header) == [(str(size), "blob_dat")]


def test_empty_input_tree_writes_root_only_header(tree_builder: TreeBuilder) -> None:
    tree_builder.mkdirs(["empty/nested"])

    result = tree_builder.generate()

    assert result.modules == []
    header = tree_builder.read_output("bin.h")
    assert namespace_events(header) == ["+Bin", "-Bin"]
    assert len(OPEN_PATTERN.findall(header)) == len(CLOSE_PATTERN.findall(header))


def test_single_root_file_has_empty_namespace_path(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"logo.png": b"\x89PNG"})

    result = tree_builder.generate()

    assert result.declarations[0].namespace_path == ()
    header = tree_builder.read_output("bin.h")
    assert namespace_events(header) == ["+Bin", "-Bin"]
    assert "extern std::array<uint8_t, 4> logo_png;" in header


def test_deep_tree_header_is_balanced_and_minimal(tree_builder: TreeBuilder) -> None:
    tree_builder.write(
        {
            "top.bin": b"t",
            "a/x.bin": b"x",
            "a/y.bin": b"y",
            "a/b/c/deep.bin": b"d",
            "a/b/c/deeper.bin": b"dd",
            "a/z/last.bin": b"l",
            "q/r/s.bin": b"s",
        }
    )

    tree_builder.generate()
    header = tree_builder.read_output("bin.h")

    assert_balanced(header)
    events = namespace_events(header)
    assert events.count("+a") == 1
    assert events.count("+c") == 1
    assert len(EXTERN_PATTERN.findall(header)) == 7


def test_output_layout_mirrors_input_tree(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"my dir/sub-dir/file.txt": b"hello"})

    tree_builder.generate()

    module = tree_builder.output / "my dir" / "sub-dir" / "file.txt.cpp"
    assert module.exists()
    text = module.read_text(encoding="utf-8")
    assert namespace_events(text) == ["+Bin", "+my_dir", "+sub_dir", "-sub_dir", "-my_dir", "-Bin"]


def test_rerun_overwrites_existing_outputs(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"a/f.bin": b"\x01"})
    tree_builder.generate()
    tree_builder.write({"a/f.bin": b"\x01\x02"})

    tree_builder.generate()

    assert declared_length(tree_builder.read_output("a/f.bin.cpp")) == 2


def test_custom_header_name_and_extension(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"a.bin": b"a"})

    result = tree_builder.generate(header_name="assets.hpp", source_extension=".cc")

    assert (tree_builder.output / "assets.hpp").exists()
    assert (tree_builder.output / "a.bin.cc").exists()
    assert result.header_path.name == "assets.hpp"


def test_parallel_jobs_keep_traversal_order(tree_builder: TreeBuilder) -> None:
    files = {f"d{index % 4}/f{index:02d}.bin": bytes([index]) * index for index in range(20)}
    tree_builder.write(files)

    serial = tree_builder.generate()
    serial_header = tree_builder.read_output("bin.h")
    parallel = tree_builder.generate(jobs=4)

    assert tree_builder.read_output("bin.h") == serial_header
    assert parallel.declarations == serial.declarations
    assert_balanced(serial_header)


def test_dry_run_writes_nothing(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"a/f.bin": b"abc"})

    result = tree_builder.generate(dry_run=True)

    assert result.dry_run is True
    assert [module.path.name for module in result.modules] == ["f.bin.cpp"]
    assert not tree_builder.output.exists()


def test_duplicate_symbols_abort_before_writing(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"a/x-y.bin": b"1", "a/x_y.bin": b"2"})

    with pytest.raises(DuplicateSymbolError) as excinfo:
        tree_builder.generate()

    assert "Bin::a::x_y_bin" in str(excinfo.value)
    assert not tree_builder.output.exists()


@pytest.mark.parametrize(
    "files, qualified",
    [
        ({"m": b"1", "-m/x.bin": b"2"}, "Bin::m"),
        ({"a/ui.png": b"1", "a/ui-png/icon.svg": b"2"}, "Bin::a::ui_png"),
    ],
)
def test_array_named_like_sibling_namespace_aborts(
    tree_builder: TreeBuilder, files: dict[str, bytes], qualified: str
) -> None:
    tree_builder.write(files)

    with pytest.raises(DuplicateSymbolError) as excinfo:
        tree_builder.generate()

    assert qualified in str(excinfo.value)
    assert not tree_builder.output.exists()


def test_directories_sanitised_alike_share_a_namespace(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"x-y/a.bin": b"1", "x_y/b.bin": b"2"})

    result = tree_builder.generate()

    assert [module.declaration.qualified_name for module in result.modules] == [
        "x_y::a_bin",
        "x_y::b_bin",
    ]
    assert (tree_builder.output / "x-y" / "a.bin.cpp").exists()
    assert (tree_builder.output / "x_y" / "b.bin.cpp").exists()


def test_relative_input_root_is_stripped_from_namespaces(tree_builder: TreeBuilder, monkeypatch) -> None:
    tree_builder.write({"sprites/2d-ui/a.bin": b"a"})
    monkeypatch.chdir(tree_builder.root.parent)

    config = GeneratorConfig(input_path="./input", output_path="out")
    result = Generator(config).run()

    assert [module.declaration.namespace_path for module in result.modules] == [("sprites", "_2d_ui")]
    assert (tree_builder.root.parent / "out" / "sprites" / "2d-ui" / "a.bin.cpp").exists()


def test_unsanitisable_name_is_fatal(tree_builder: TreeBuilder) -> None:
    tree_builder.write({"---/file.bin": b"1"})

    with pytest.raises(SanitizationError):
        tree_builder.generate()
    assert not tree_builder.output.exists()


def test_read_failure_aborts_run_without_header(tree_builder: TreeBuilder, monkeypatch) -> None:
    tree_builder.write({"a.bin": b"a", "b.bin": b"b"})
    real_read = scanner_module.read_bytes

    def _failing_read(path):
        if str(path).endswith("b.bin"):
            raise InputReadError(path, PermissionError(13, "Permission denied"))
        return real_read(path)

    monkeypatch.setattr(scanner_module, "read_bytes", _failing_read)

    with pytest.raises(InputReadError):
        tree_builder.generate()

    assert (tree_builder.output / "a.bin.cpp").exists()
    assert not (tree_builder.output / "bin.h").exists()


def test_write_failure_is_reported(tree_builder: TreeBuilder, monkeypatch) -> None:
    tree_builder.write({"a.bin": b"a"})

    def _failing_write(path, contents):
        raise OutputWriteError(path, OSError(28, "No space left on device"))

    monkeypatch.setattr(generator_module, "write_text", _failing_write)

    with pytest.raises(OutputWriteError) as excinfo:
        tree_builder.generate()
    assert excinfo.value.errno == 28


def test_output_inside_input_is_not_embedded(tmp_path: Path) -> None:
    source = tmp_path / "assets"
    (source / "data").mkdir(parents=True)
    (source / "data" / "a.bin").write_bytes(b"a")
    output = source / "generated"

    config = GeneratorConfig(input_path=str(source), output_path=str(output))
    Generator(config).run()
    result = Generator(config).run()

    assert [module.declaration.qualified_name for module in result.modules] == ["data::a_bin"]


def test_output_root_is_normalised(tree_builder: TreeBuilder) -> None:
    config = GeneratorConfig(input_path=str(tree_builder.root), output_path="build\\generated")
    generator = Generator(config)

    assert generator.output_root == "build/generated/"
    assert generator.header_path == Path("build/generated/bin.h")
