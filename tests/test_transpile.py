import logging

import pytest

from qur.qur_ast import Program, VarDecl, Variable
from qur.qur_constants import VarType
from qur.qur_parser import parse
from qur.qur_transpile import AsmEmitter, TranspileResult, Transpiler


@pytest.fixture  # type: ignore[misc]
def program() -> Program:
    return parse("fn int main() { return 0; }")


class EchoEmitter:
    supported = True

    def emit(self, program: Program) -> str:
        return program.render()


def test_default_target_is_asm() -> None:
    transpiler = Transpiler()
    assert transpiler.target == "asm"
    assert isinstance(transpiler.emitter, AsmEmitter)


@pytest.mark.parametrize("target", ["asm", "x86", "ASM", "X86"])
def test_known_targets(target: str) -> None:
    assert Transpiler(target).target == target.lower()


def test_unknown_target_raises() -> None:
    with pytest.raises(ValueError, match="Unknown transpilation target"):
        Transpiler("python")


def test_asm_result_is_unsupported(program: Program) -> None:
    result = Transpiler("asm").transpile(program)
    assert result == TranspileResult(
        "asm",
        supported=False,
        message="code generation for target 'asm' is not implemented",
    )
    assert result.output is None


def test_unsupported_result_never_looks_successful(program: Program) -> None:
    result = Transpiler("x86").transpile(program)
    assert not result.supported
    with pytest.raises(NotImplementedError, match="not implemented"):
        result.unwrap()


def test_unsupported_transpile_is_logged(
    program: Program, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="qur.qur_transpile"):
        Transpiler().transpile(program)
    assert "not implemented" in caplog.text


def test_transpile_rejects_non_program() -> None:
    with pytest.raises(TypeError, match="must be a Program"):
        Transpiler().transpile(Variable("x"))  # type: ignore[arg-type]


def test_asm_emitter_emit_raises(program: Program) -> None:
    with pytest.raises(NotImplementedError, match="AsmEmitter is not yet implemented"):
        AsmEmitter().emit(program)


def test_supported_emitter_output(program: Program) -> None:
    transpiler = Transpiler()
    transpiler.emitter = EchoEmitter()
    result = transpiler.transpile(program)
    assert result.supported
    assert result.message == "ok"
    assert result.unwrap() == program.render()


def test_result_is_immutable() -> None:
    result = TranspileResult("asm", supported=True, output="", message="ok")
    assert result.unwrap() == ""
    with pytest.raises(AttributeError):
        result.output = "x"  # type: ignore[misc]


def test_transpile_declaration_only_program() -> None:
    result = Transpiler().transpile(Program((VarDecl("x", VarType.INT),)))
    assert not result.supported
