"""Shared IR builders for the analysis core tests."""

import pytest

from irscan.core.function import Function
from irscan.core.models import (
    BranchInfo, ConcreteLibfunc, FunctionData,
    Invocation, LibfuncKind, Return, Signature, Type
)
from irscan.core.program import Program
from irscan.core.registry import ProgramRegistry


BUILTINS = frozenset({"RangeCheck", "GasBuiltin", "System", "Pedersen"})

BALANCE_READ = "contract::balance::read"
BALANCE_WRITE = "contract::balance::write"
BALANCE_ADDRESS = "contract::balance::address"
TRANSFER_CALL = "contract::IERC20Dispatcher::transfer"
TRANSFER_LIBRARY = "contract::IERC20LibraryDispatcher::transfer"
EMIT_TRANSFER = "contract::Transfer::emit"
U256_ADD = "core::integer::u256_add"
HELPER = "contract::helper"
WRAPPER = "contract::__wrapper_withdraw"

CALLEE_ROLES = {
    BALANCE_READ: Type.STORAGE,
    BALANCE_WRITE: Type.STORAGE,
    BALANCE_ADDRESS: Type.STORAGE,
    TRANSFER_CALL: Type.ABI_CALL_CONTRACT,
    TRANSFER_LIBRARY: Type.ABI_LIBRARY_CALL,
    EMIT_TRANSFER: Type.EVENT,
    U256_ADD: Type.CORE,
    HELPER: Type.PRIVATE,
    WRAPPER: Type.WRAPPER,
}


class IRFactory:
    """Builds statements, functions and programs for tests."""

    def __init__(self):
        self.registry = ProgramRegistry([
            ConcreteLibfunc("store_temp"),
            ConcreteLibfunc("jump"),
            ConcreteLibfunc("enum_match"),
        ])
        self._next_entry = 1000

    def call(self, name: str) -> Invocation:
        libfunc_id = f"function_call<user@{name}>"
        if libfunc_id not in self.registry:
            self.registry.register(ConcreteLibfunc(libfunc_id, LibfuncKind.FUNCTION_CALL, name))
        return Invocation(libfunc_id, args=[0, 1])

    def op(self, libfunc_id: str = "store_temp") -> Invocation:
        return Invocation(libfunc_id, args=[0])

    def jump(self, target: int) -> Invocation:
        return Invocation("jump", branches=[BranchInfo(target)])

    def branch(self, *targets) -> Invocation:
        return Invocation("enum_match", args=[0], branches=[BranchInfo(t) for t in targets])

    def ret(self) -> Return:
        return Return([0])

    def function(self, name, statements, entry_point=0, params=(), rets=()) -> Function:
        data = FunctionData(
            id=name,
            signature=Signature(param_types=[p.ty for p in params], ret_types=list(rets)),
            params=list(params),
            entry_point=entry_point,
        )
        return Function(data, statements, builtins=BUILTINS)

    def stub(self, name) -> Function:
        entry = self._next_entry
        self._next_entry += 10
        return self.function(name, [self.ret()], entry_point=entry)

    def callees(self):
        return [self.stub(name) for name in CALLEE_ROLES]

    def program(self, functions, roles) -> Program:
        """Program made of ``functions`` plus every callee stub, roles assigned."""
        program = Program(list(functions) + self.callees(), self.registry)
        program.assign_roles({**CALLEE_ROLES, **roles})
        return program

    def analyzed(self, name, statements, role=Type.EXTERNAL, entry_point=0) -> Function:
        """Run every pass on a single function and return it."""
        function = self.function(name, statements, entry_point=entry_point)
        program = self.program([function], {name: role})
        program.analyze()
        program.run_analyses()
        return function


class RecordingLogger:
    """Collects logged messages."""

    def __init__(self):
        self.messages = []

    def log(self, message, level=None):
        self.messages.append((level, message))

    def log_error(self, message):
        self.messages.append(("error", message))


@pytest.fixture
def ir():
    """Fresh IR factory with its own registry."""
    return IRFactory()


@pytest.fixture
def recording_logger():
    return RecordingLogger()
