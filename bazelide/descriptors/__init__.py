"""Descriptor loading, discovery and aggregation."""

from .aggregate import (
    JarEntry,
    JavaAggregate,
    JavaAggregator,
    NativeAggregate,
    NativeAggregator,
    anchor_include_path,
    resolve_jar_path,
)
from .base import (
    Descriptor,
    DescriptorError,
    DescriptorFamily,
    JavaDescriptor,
    NativeDescriptor,
    OtherDescriptor,
    classify_kind,
    load_descriptor,
)
from .discovery import find_descriptor_files, remove_descriptor_files

__all__ = [
    "Descriptor",
    "DescriptorError",
    "DescriptorFamily",
    "JarEntry",
    "JavaAggregate",
    "JavaAggregator",
    "JavaDescriptor",
    "NativeAggregate",
    "NativeAggregator",
    "NativeDescriptor",
    "OtherDescriptor",
    "anchor_include_path",
    "classify_kind",
    "find_descriptor_files",
    "load_descriptor",
    "remove_descriptor_files",
    "resolve_jar_path",
]
