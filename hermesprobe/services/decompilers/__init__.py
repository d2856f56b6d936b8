"""External decompiler capabilities."""

from .service import BytecodeDecompiler, HermesDecDecompiler, JadxDecompiler, NativeDecompiler

__all__ = [
    "BytecodeDecompiler",
    "HermesDecDecompiler",
    "JadxDecompiler",
    "NativeDecompiler",
]
