"""hmtrace — step-by-step Hindley-Milner type inference for a small ML-like language"""

__version__ = "0.1.0"

from hmtrace.errors import (
    ErrorKind, HMError, InferenceError, LexError, ParseError,
    UndefinedVariableError, TypeMismatchError, InfiniteTypeError,
    UnknownExpressionError,
)
from hmtrace.lexer import tokenize
from hmtrace.parser import parse
from hmtrace.pipeline import InferenceRun, InferenceResult, run_inference
from hmtrace.trace import TraceCategory, TraceEvent
