"""Editor project file synthesizers."""

from .cpp import CppProjectSynthesizer, CppSynthesisResult
from .java import JavaProjectError, JavaProjectSynthesizer, JavaSynthesisResult

__all__ = [
    "CppProjectSynthesizer",
    "CppSynthesisResult",
    "JavaProjectError",
    "JavaProjectSynthesizer",
    "JavaSynthesisResult",
]
