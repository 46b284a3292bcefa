"""Tests for whole-program phase ordering."""

import pytest

from irscan.core.models import Type
from irscan.core.program import Program
from irscan.logger import LogLevel
from irscan.utils import PhaseOrderError, RoleAssignmentError, RoleNotAssignedError

from conftest import BALANCE_WRITE, CALLEE_ROLES, TRANSFER_CALL


class TestProgramPhases:
    """Passes run in order: roles, analyze, run_analyses."""

    def test_full_pipeline(self, ir):
        """Test roles, analyze and run_analyses over a small program."""
        vulnerable = ir.function("contract::withdraw", [ir.call(TRANSFER_CALL), ir.call(BALANCE_WRITE), ir.ret()])
        safe = ir.function("contract::deposit", [ir.call(BALANCE_WRITE), ir.ret()], entry_point=10)
        program = ir.program([vulnerable, safe], {
            "contract::withdraw": Type.EXTERNAL,
            "contract::deposit": Type.EXTERNAL,
        })
        program.analyze()
        program.run_analyses()

        assert program.analyses_run
        assert program.reentrant_functions() == [vulnerable]
        assert program.get_function("contract::deposit") is safe
        assert program.get_function("contract::missing") is None
        assert program.roles()["contract::withdraw"] is Type.EXTERNAL

    def test_analyze_before_roles(self, ir):
        """Test analyze before roles."""
        program = Program(ir.callees(), ir.registry)
        with pytest.raises(PhaseOrderError):
            program.analyze()

    def test_run_analyses_before_analyze(self, ir):
        """Test run analyses before analyze."""
        program = ir.program([], {})
        with pytest.raises(PhaseOrderError):
            program.run_analyses()

    def test_roles_assigned_once(self, ir):
        """Test roles assigned once."""
        program = ir.program([], {})
        with pytest.raises(PhaseOrderError):
            program.assign_roles(CALLEE_ROLES)

    def test_missing_role(self, ir):
        """Test a function left without a role is rejected."""
        function = ir.function("contract::withdraw", [ir.ret()])
        program = Program([function] + ir.callees(), ir.registry)
        with pytest.raises(RoleAssignmentError):
            program.assign_roles(CALLEE_ROLES)
        assert not function.has_role

    def test_unknown_name(self, ir):
        """Test a role for an unknown function is rejected."""
        program = Program(ir.callees(), ir.registry)
        with pytest.raises(RoleAssignmentError):
            program.assign_roles({**CALLEE_ROLES, "contract::ghost": Type.VIEW})

    def test_preassigned_role_leaves_others_untouched(self, ir):
        """Test preassigned role leaves others untouched."""
        functions = ir.callees()
        functions[-1]._set_ty(Type.WRAPPER)
        program = Program(functions, ir.registry)

        with pytest.raises(RoleAssignmentError):
            program.assign_roles(CALLEE_ROLES)
        assert not program.roles_assigned
        assert [f.has_role for f in functions] == [False] * (len(functions) - 1) + [True]

    def test_role_callable(self, ir):
        """Test roles given by a callable."""
        program = Program(ir.callees(), ir.registry)
        program.assign_roles(lambda f: CALLEE_ROLES[f.name])
        assert program.roles() == CALLEE_ROLES

    def test_unassigned_callee_is_fatal(self, ir):
        """Test unassigned callee is fatal."""
        # Skipping the role phase surfaces when the classifier reads the callee's role
        caller = ir.function("contract::withdraw", [ir.call(TRANSFER_CALL), ir.ret()])
        callee = ir.stub(TRANSFER_CALL)
        with pytest.raises(RoleNotAssignedError):
            caller.analyze([caller, callee], ir.registry)

    def test_duplicate_names_warned(self, ir, recording_logger):
        """Test duplicate names warned."""
        first = ir.stub("contract::dup")
        second = ir.stub("contract::dup")
        program = Program([first, second], ir.registry, logger=recording_logger)

        assert program.duplicate_function_names() == ["contract::dup"]
        assert recording_logger.messages[0][0] is LogLevel.WARNING
        assert len(program) == 2
        assert list(program) == [first, second]
