"""Tests for descriptor parsing and family selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from bazelide.descriptors import (
    DescriptorError,
    DescriptorFamily,
    JavaDescriptor,
    NativeDescriptor,
    OtherDescriptor,
    classify_kind,
    load_descriptor,
)
from tests._fixtures.workspace_builder import WorkspaceBuilder


@pytest.mark.parametrize(
    ("kind", "family"),
    [
        ("cc_library", DescriptorFamily.NATIVE),
        ("cc_toolchain", DescriptorFamily.NATIVE),
        ("apple_cc_toolchain", DescriptorFamily.NATIVE),
        ("java_binary", DescriptorFamily.JAVA),
        ("java_import", DescriptorFamily.JAVA),
        ("py_library", DescriptorFamily.OTHER),
        ("objc_library", DescriptorFamily.OTHER),
    ],
)
def test_classify_kind(kind: str, family: DescriptorFamily) -> None:
    assert classify_kind(kind) is family


def test_load_native_descriptor(workspace_builder: WorkspaceBuilder) -> None:
    path = workspace_builder.descriptor(
        "cc_binary",
        label="//app:tool",
        cc={
            "include_dirs": ["app/include"],
            "system_include_dirs": ["third_party/abc"],
            "quote_include_dirs": ["."],
            "defines": ["NDEBUG"],
            "built_in_include_directory": ["/usr/include"],
            "base_compiler_option": ["-Wall"],
            "c_option": ["-std=c11"],
            "cpp_option": ["-std=c++17"],
            "cpp_executable": "/usr/bin/gcc",
        },
    )

    descriptor = load_descriptor(path)

    assert isinstance(descriptor, NativeDescriptor)
    assert descriptor.label == "//app:tool"
    assert descriptor.relative_include_dirs == ("app/include", "third_party/abc", ".")
    assert descriptor.compiler_flags == ("-std=c11", "-std=c++17", "-Wall")
    assert descriptor.cpp_executable == "/usr/bin/gcc"
    assert descriptor.source == path


def test_load_native_descriptor_without_cc_section(workspace_builder: WorkspaceBuilder) -> None:
    descriptor = load_descriptor(workspace_builder.descriptor("cc_library"))

    assert isinstance(descriptor, NativeDescriptor)
    assert descriptor.relative_include_dirs == ()
    assert descriptor.cpp_executable is None


def test_load_java_descriptor(workspace_builder: WorkspaceBuilder) -> None:
    path = workspace_builder.descriptor(
        "java_library",
        files={"srcs": ["java/com/acme/Main.java"], "hdrs": []},
        java={
            "jars": [
                {
                    "jar": {"relative_path": "lib.jar", "root_execution_path_fragment": "bazel-out/bin"},
                    "source_jar": {"relative_path": "lib-src.jar", "is_source": True},
                },
                {"jar": {"is_external": True}},
            ],
            "runtime_classpath": [{"relative_path": "dep.jar", "is_external": True}],
        },
    )

    descriptor = load_descriptor(path)

    assert isinstance(descriptor, JavaDescriptor)
    assert len(descriptor.jars) == 1
    assert descriptor.jars[0].jar.root_execution_path_fragment == "bazel-out/bin"
    assert descriptor.jars[0].source_jar is not None
    assert descriptor.jars[0].source_jar.is_source is True
    assert descriptor.runtime_classpath[0].is_external is True
    assert descriptor.srcs == ("java/com/acme/Main.java",)


def test_load_other_descriptor(workspace_builder: WorkspaceBuilder) -> None:
    descriptor = load_descriptor(workspace_builder.descriptor("py_binary"))

    assert isinstance(descriptor, OtherDescriptor)
    assert descriptor.family is DescriptorFamily.OTHER


def test_load_missing_descriptor_raises(tmp_path: Path) -> None:
    with pytest.raises(DescriptorError, match="Cannot read"):
        load_descriptor(tmp_path / "absent.json")


def test_load_malformed_descriptor_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{\"kind\": \"cc_library\",", encoding="utf-8")

    with pytest.raises(DescriptorError, match="Malformed"):
        load_descriptor(path)


def test_load_descriptor_requires_kind(tmp_path: Path) -> None:
    path = tmp_path / "nokind.json"
    path.write_text("{\"cc\": {}}", encoding="utf-8")

    with pytest.raises(DescriptorError, match="rule kind"):
        load_descriptor(path)


def test_load_descriptor_with_invalid_utf8_raises(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"kind": "cc_library", "x": "\xff\xfe"}')

    with pytest.raises(DescriptorError, match="Cannot read"):
        load_descriptor(path)
