"""IR data models: function roles, signatures and statements."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class Type(Enum):
    """Role of a function in the compiled program."""
    EXTERNAL = "external"                  # External function defined by the user
    VIEW = "view"                          # View function defined by the user
    PRIVATE = "private"                    # Private function defined by the user
    CONSTRUCTOR = "constructor"            # Constructor defined by the user
    EVENT = "event"                        # Event emitter
    STORAGE = "storage"                    # Compiler-made storage accessor (address, read, write)
    WRAPPER = "wrapper"                    # Compiler-made wrapper around an external function
    CORE = "core"                          # Function of the core library
    ABI_CALL_CONTRACT = "abi_call_contract"  # ABI trait method doing a call contract
    ABI_LIBRARY_CALL = "abi_library_call"    # ABI trait method doing a library call
    L1_HANDLER = "l1_handler"              # L1 handler function


@dataclass(frozen=True)
class ConcreteTypeId:
    """Identifier of a concrete IR type."""
    id: int
    debug_name: Optional[str] = None

    def __str__(self) -> str:
        return self.debug_name if self.debug_name is not None else f"[{self.id}]"


@dataclass(frozen=True)
class Param:
    """Declared function parameter."""
    id: int
    ty: ConcreteTypeId


@dataclass(frozen=True)
class Signature:
    """Declared parameter and return types of a function."""
    param_types: List[ConcreteTypeId] = field(default_factory=list)
    ret_types: List[ConcreteTypeId] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionData:
    """Raw function record as emitted by the IR loader."""
    id: str
    signature: Signature
    params: List[Param] = field(default_factory=list)
    entry_point: int = 0


class BranchTarget(Enum):
    """Symbolic branch target; numeric targets are plain statement indices."""
    FALLTHROUGH = "fallthrough"


@dataclass(frozen=True)
class BranchInfo:
    """One possible continuation of an invocation."""
    target: Union[BranchTarget, int] = BranchTarget.FALLTHROUGH
    results: List[int] = field(default_factory=list)

    @property
    def is_fallthrough(self) -> bool:
        return self.target is BranchTarget.FALLTHROUGH


@dataclass(frozen=True)
class Invocation:
    """Invocation of a library operation."""
    libfunc_id: str
    args: List[int] = field(default_factory=list)
    branches: List[BranchInfo] = field(default_factory=lambda: [BranchInfo()])

    @property
    def is_straight_line(self) -> bool:
        """True when control always continues with the next statement."""
        return len(self.branches) == 1 and self.branches[0].is_fallthrough

    def __str__(self) -> str:
        args = ", ".join(f"[{a}]" for a in self.args)
        return f"{self.libfunc_id}({args})"


@dataclass(frozen=True)
class Return:
    """Return of the given variables to the caller."""
    vars: List[int] = field(default_factory=list)

    def __str__(self) -> str:
        return "return(" + ", ".join(f"[{v}]" for v in self.vars) + ")"


Statement = Union[Invocation, Return]


class LibfuncKind(Enum):
    """What a registered library operation does, as far as the core cares."""
    FUNCTION_CALL = "function_call"
    OTHER = "other"


@dataclass(frozen=True)
class ConcreteLibfunc:
    """Registry entry for a library operation."""
    id: str
    kind: LibfuncKind = LibfuncKind.OTHER
    function_id: Optional[str] = None  # Callee name for FUNCTION_CALL
