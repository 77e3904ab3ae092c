"""
Provides the `Transpiler` class and emitter interfaces for turning QUR ASTs into code.

Classes and Features:
    - Emitter (Protocol): Interface for all backend emitters.
    - AsmEmitter: Placeholder for the assembly backend. It reports itself as
      unsupported instead of producing output.
    - TranspileResult: Outcome of a transpile call. Callers must check
      `supported` (or call `unwrap()`) before using `output`.
    - Transpiler: Selects an emitter by target name and runs it over a Program.

No backend is implemented yet, so every transpile returns an unsupported
result. It never returns an empty "successful" output.

Example:
    >>> result = Transpiler("asm").transpile(program)
    >>> result.supported
    False

Raises:
    ValueError: If the target language is not known.
    TypeError: If the input is not a Program node.
    NotImplementedError: From `TranspileResult.unwrap()` on an unsupported result.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from qur.qur_ast import Program

logger = logging.getLogger(__name__)


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all QUR emitters.

    Attributes:
        supported (bool): Whether the emitter can generate code at all.
    """

    supported: bool

    def emit(self, program: Program) -> str: ...  # pragma: no cover


class AsmEmitter:
    """Placeholder for the assembly emitter. Code generation is not implemented."""

    supported = False

    def emit(self, program: Program) -> str:
        raise NotImplementedError("AsmEmitter is not yet implemented.")


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""


@dataclass(frozen=True)
class TranspileResult:
    """Outcome of `Transpiler.transpile`.

    Attributes:
        target (str): The normalized target name.
        supported (bool): False when the backend cannot generate code.
        output (str | None): Generated code, only set when supported.
        message (str): Human-readable status.
    """

    target: str
    supported: bool
    output: str | None = None
    message: str = ""

    def unwrap(self) -> str:
        """Return the generated code, or raise if generation was unsupported."""
        if not self.supported or self.output is None:
            raise NotImplementedError(self.message)
        return self.output


class Transpiler:
    """Dispatches a QUR Program to the emitter for a target language.

    Attributes:
        target (str): The normalized target name.
        emitter (Emitter): The selected emitter instance.
    """

    def __init__(self, target: str = "asm") -> None:
        """Initializes the transpiler with the desired output target.

        Raises:
            ValueError: If the target language is not supported.
        """
        emitters: dict[str, EmitterType] = {
            "asm": AsmEmitter,
            "x86": AsmEmitter,
        }
        target = target.lower()
        if target not in emitters:
            raise ValueError(f"Unknown transpilation target: {target!r}")
        self.target = target
        self.emitter: Emitter = emitters[target]()

    def transpile(self, program: Program) -> TranspileResult:
        """Generates code for ``program``.

        Returns:
            TranspileResult: With ``supported=False`` and no output while the
            selected backend is a placeholder.

        Raises:
            TypeError: If ``program`` is not a Program node.
        """
        if not isinstance(program, Program):
            raise TypeError("Transpiler input must be a Program node.")
        if not self.emitter.supported:
            message = f"code generation for target {self.target!r} is not implemented"
            logger.info("%s", message)
            return TranspileResult(self.target, supported=False, message=message)
        output = self.emitter.emit(program)
        return TranspileResult(self.target, supported=True, output=output, message="ok")


__all__ = ["AsmEmitter", "Emitter", "TranspileResult", "Transpiler"]
