"""Whole-program container enforcing the order of the analysis passes."""

from collections import Counter
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from irscan.core.function import Function
from irscan.core.models import Type
from irscan.core.registry import ProgramRegistry
from irscan.logger import LogLevel
from irscan.utils import PhaseOrderError, RoleAssignmentError


class Program:
    """The frozen list of functions of a compiled program and its registry.

    Passes must run in order: :meth:`assign_roles`, then :meth:`analyze`,
    then :meth:`run_analyses`. Each function only ever sees the other
    functions through the read-only tuple held here.
    """

    def __init__(self, functions: Sequence[Function], registry: ProgramRegistry, logger=None):
        """Initialize the program.

        Args:
            functions: Every function of the program, in program order
            registry: Operation registry of the program
            logger: Logger instance
        """
        self.functions: Tuple[Function, ...] = tuple(functions)
        self.registry = registry
        self.logger = logger
        self.roles_assigned = False
        self.analyzed = False
        self.analyses_run = False

        duplicates = self.duplicate_function_names()
        if duplicates and self.logger:
            self.logger.log(f"Duplicate function names resolve to their first definition: {', '.join(duplicates)}",
                            LogLevel.WARNING)

    def __len__(self) -> int:
        return len(self.functions)

    def __iter__(self):
        return iter(self.functions)

    def get_function(self, name: str) -> Optional[Function]:
        """First function with the given name, in program order."""
        for function in self.functions:
            if function.name == name:
                return function
        return None

    def duplicate_function_names(self) -> List[str]:
        counts = Counter(f.name for f in self.functions)
        return sorted(name for name, count in counts.items() if count > 1)

    def assign_roles(self, roles: Union[Mapping[str, Type], Callable[[Function], Optional[Type]]]) -> None:
        """Give every function its role.

        Args:
            roles: Either a mapping from function name to role, in which case
                functions sharing a name receive the same role, or a callable
                returning the role of each function

        Raises:
            RoleAssignmentError: If a function gets no role, already has one,
                or an unknown name is given
            PhaseOrderError: If roles were already assigned
        """
        if self.roles_assigned:
            raise PhaseOrderError("Roles are assigned only once")
        if isinstance(roles, Mapping):
            unknown = sorted(set(roles) - {f.name for f in self.functions})
            if unknown:
                raise RoleAssignmentError(f"Roles given for unknown functions: {', '.join(unknown)}")
            resolve = lambda function: roles.get(function.name)
        else:
            resolve = roles

        assigned = [(function, resolve(function)) for function in self.functions]
        missing = sorted({f.name for f, role in assigned if role is None})
        if missing:
            raise RoleAssignmentError(f"No role given for: {', '.join(missing)}")
        already = sorted({f.name for f in self.functions if f.has_role})
        if already:
            raise RoleAssignmentError(f"Roles already set for: {', '.join(already)}")

        for function, role in assigned:
            function._set_ty(role)
        self.roles_assigned = True

    def analyze(self) -> None:
        """Build the CFG and classify the call sites of every function."""
        if not self.roles_assigned:
            raise PhaseOrderError("analyze requires every function role to be assigned")
        for function in self.functions:
            function.analyze(self.functions, self.registry)
        self.analyzed = True
        if self.logger:
            self.logger.log(f"Analyzed {len(self.functions)} functions", LogLevel.DEBUG)

    def run_analyses(self) -> None:
        """Run the dataflow analyses on every function."""
        if not self.analyzed:
            raise PhaseOrderError("run_analyses requires analyze to have run")
        for function in self.functions:
            function.run_analyses(self.functions, self.registry)
        self.analyses_run = True

    def reentrant_functions(self) -> List[Function]:
        return [f for f in self.functions if f.is_reentrant()]

    def roles(self) -> Dict[str, Type]:
        return {f.name: f.ty for f in self.functions}
