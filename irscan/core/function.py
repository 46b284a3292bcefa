"""Program model: one compiled function and the results computed on it."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence

from irscan.analysis.dataflow import Engine
from irscan.analysis.reentrancy import ReentrancyAnalysis, ReentrancyState
from irscan.config import load_builtin_type_names
from irscan.core.call_classifier import CallBuckets, CallClassifier
from irscan.core.models import ConcreteTypeId, FunctionData, Param, Statement, Type
from irscan.core.registry import ProgramRegistry
from irscan.ir.control_flow_graph import CFG, CFGBuilder
from irscan.logger import LogLevel
from irscan.utils import PhaseOrderError, RoleAlreadyAssignedError, RoleNotAssignedError


@dataclass
class Analyses:
    """Results of the dataflow analyses run on a function."""
    reentrancy: Dict[int, ReentrancyState] = field(default_factory=dict)


class Function:
    """A compiled function together with its CFG, call sites and analyses.

    A function goes through three passes: its role is assigned by the
    whole-program classification, then :meth:`analyze` builds the CFG and
    classifies call sites, and finally :meth:`run_analyses` runs the dataflow
    analyses. Afterwards it is read-only.
    """

    def __init__(self, data: FunctionData, statements: Sequence[Statement],
                 builtins: Optional[FrozenSet[str]] = None, logger=None):
        """Initialize a function with no role and nothing computed yet.

        Args:
            data: Raw IR function record
            statements: The function's statements, the first one at ``data.entry_point``
            builtins: Names of implicit builtin types, loaded from the configuration when omitted
            logger: Logger instance
        """
        self.data = data
        self.logger = logger
        self._ty: Optional[Type] = None
        self._statements: List[Statement] = list(statements)
        self._builtins = builtins if builtins is not None else load_builtin_type_names()
        self._cfg: Optional[CFG] = None
        self._calls = CallBuckets()
        self._classified = False
        self._analyses = Analyses()

    def __repr__(self) -> str:
        role = self._ty.value if self._ty is not None else "unassigned"
        return f"Function({self.name!r}, {role})"

    @property
    def name(self) -> str:
        return self.data.id

    @property
    def entry_point(self) -> int:
        return self.data.entry_point

    @property
    def ty(self) -> Type:
        if self._ty is None:
            raise RoleNotAssignedError(f"Role of {self.name} queried before it was assigned")
        return self._ty

    @property
    def has_role(self) -> bool:
        return self._ty is not None

    def _set_ty(self, ty: Type) -> None:
        # Called by Program.assign_roles only
        if self._ty is not None:
            raise RoleAlreadyAssignedError(f"Role of {self.name} is already {self._ty.value}")
        self._ty = ty

    def _is_builtin(self, ty: ConcreteTypeId) -> bool:
        return ty.debug_name in self._builtins

    def params(self) -> Iterator[Param]:
        """Function parameters without the builtins."""
        return (p for p in self.data.params if not self._is_builtin(p.ty))

    def params_all(self) -> Iterator[Param]:
        return iter(self.data.params)

    def returns(self) -> Iterator[ConcreteTypeId]:
        """Function return types without the builtins."""
        return (r for r in self.data.signature.ret_types if not self._is_builtin(r))

    def returns_all(self) -> Iterator[ConcreteTypeId]:
        return iter(self.data.signature.ret_types)

    def get_statements(self) -> Sequence[Statement]:
        return tuple(self._statements)

    def get_statements_at(self, at: int) -> Sequence[Statement]:
        """Statements from the local offset ``at`` to the end of the function."""
        return tuple(self._statements[at:])

    def get_cfg(self) -> Optional[CFG]:
        return self._cfg

    def storage_vars_read(self) -> Iterator[Statement]:
        return iter(self._calls.storage_vars_read)

    def storage_vars_written(self) -> Iterator[Statement]:
        return iter(self._calls.storage_vars_written)

    def core_functions_calls(self) -> Iterator[Statement]:
        return iter(self._calls.core_functions_calls)

    def private_functions_calls(self) -> Iterator[Statement]:
        return iter(self._calls.private_functions_calls)

    def events_emitted(self) -> Iterator[Statement]:
        return iter(self._calls.events_emitted)

    def external_functions_calls(self) -> Iterator[Statement]:
        return iter(self._calls.external_functions_calls)

    def library_functions_calls(self) -> Iterator[Statement]:
        return iter(self._calls.library_functions_calls)

    def analyses(self) -> Analyses:
        return self._analyses

    def analyze(self, functions: Sequence["Function"], registry: ProgramRegistry) -> None:
        """Build the CFG and classify the call sites.

        Every function in ``functions`` must already have its role.
        """
        if self._cfg is None:
            self._cfg = CFGBuilder(logger=self.logger).build_cfg(
                self.name, self._statements, self.entry_point, functions, registry
            )
        self._classify_calls(functions, registry)

    def _classify_calls(self, functions: Sequence["Function"], registry: ProgramRegistry) -> None:
        """Fill the call site buckets; they are only ever filled once."""
        if self._classified:
            return
        classifier = CallClassifier(functions, registry, logger=self.logger)
        self._calls = classifier.classify(self._statements)
        self._classified = True

    def run_analyses(self, functions: Sequence["Function"], registry: ProgramRegistry) -> None:
        """Run the reentrancy analysis; only external functions are analyzed."""
        if self.ty is not Type.EXTERNAL:
            return
        if self._cfg is None:
            raise PhaseOrderError(f"run_analyses called on {self.name} before analyze")
        engine = Engine(self._cfg, ReentrancyAnalysis(), logger=self.logger)
        self._analyses.reentrancy = dict(engine.run_analysis(functions, registry))
        if self.logger and self.is_reentrant():
            self.logger.log(f"{self.name} writes storage after an external call "
                            f"in blocks {self.reentrant_blocks()}", LogLevel.INFO)

    def reentrant_blocks(self) -> List[int]:
        return sorted(b for b, state in self._analyses.reentrancy.items()
                      if state is ReentrancyState.WRITE_AFTER_CALL)

    def is_reentrant(self) -> bool:
        return bool(self.reentrant_blocks())
