"""
Control-path manager for assignment dispatch.

Assignments are dispatched on the variant pair of their operands, exposed as
the ``variant`` attribute of an assignment request:

    @assignment_control_path_manager(
        Assignment, Assignment.run, (OperandVariant.TENSOR, OperandVariant.SCALAR)
    )
    def assign_scalar(self: Assignment) -> None: ...

Supporting a new operand pair means registering one more control path here;
there is no open-ended reflection.
"""

from ...domain.utils._control_path import create_path_builder

# Control-path manager that dispatches assignment requests on `self.variant`
assignment_control_path_manager = create_path_builder("variant")
