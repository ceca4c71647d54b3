"""Graph <-> program compiler"""

from motionblocks.compiler.diagnostics import CompileWarning
from motionblocks.compiler.value_resolver import ValueResolver, resolve, parse_number
from motionblocks.compiler.compiler import Compiler, compile_graph
from motionblocks.compiler.decompiler import Decompiler, decompile_program

__all__ = [
    "CompileWarning",
    "ValueResolver",
    "resolve",
    "parse_number",
    "Compiler",
    "compile_graph",
    "Decompiler",
    "decompile_program",
]
