"""Operation-scoped naming for derived types and members.

Every derived type name is prefixed with the owning operation's name, so two
operations never produce the same options or builder type even when their
parameters are identical. Member names are the parameter names passed
through the generator's ordinary identifier escaping.
"""

import builtins
import dataclasses
import logging
from collections.abc import Iterable

from optsgen.codegen.types import ANNOTATION_BUILTINS, TYPE_IMPORT_NAMES
from optsgen.codegen.utils import (
    sanitize_identifier,
    sanitize_member_name,
    sanitize_parameter_field_name,
)
from optsgen.exceptions import NameCollisionError
from optsgen.model import Operation

logger = logging.getLogger(__name__)

__all__ = [
    'BUILDER_SUFFIX',
    'OPTIONS_SUFFIX',
    'NamingResolver',
    'ResolvedNames',
    'builder_type_name',
    'options_type_name',
]

OPTIONS_SUFFIX = 'Params'
BUILDER_SUFFIX = 'Builder'

# Members the emitted code itself defines or binds.
_CALL_MEMBERS = frozenset({'configuration', 'params', 'build', 'builder'})

_BUILTINS = frozenset(dir(builtins))


def options_type_name(operation_name: str) -> str:
    return f'{sanitize_identifier(operation_name)}{OPTIONS_SUFFIX}'


def builder_type_name(options_name: str) -> str:
    return f'{options_name}{BUILDER_SUFFIX}'


@dataclasses.dataclass(frozen=True)
class ResolvedNames:
    """Names assigned to one operation's generated artifacts.

    ``options_name`` and ``builder_name`` are None when the operation keeps
    its flat signature. ``field_names`` and ``setter_names`` line up with the
    operation's parameters; they are also the names of the call-site locals.
    """

    operation_name: str
    function_name: str
    async_function_name: str
    options_name: str | None
    builder_name: str | None
    field_names: tuple[str, ...]
    setter_names: tuple[str, ...]

    @property
    def type_names(self) -> tuple[str, ...]:
        return tuple(n for n in (self.options_name, self.builder_name) if n)

    @property
    def module_names(self) -> tuple[str, ...]:
        """Every module-level name this operation defines."""
        return (self.function_name, self.async_function_name, *self.type_names)


class NamingResolver:
    """Resolves collision-free names for one operation at a time.

    The resolver only reads its reserved-name set, so one instance can be
    shared across operations processed in any order or concurrently.

    Args:
        reserved: Module-level names the generated endpoints module already
            uses (model classes, runtime helpers, imported names).
    """

    def __init__(self, reserved: Iterable[str] = ()):
        self.reserved = frozenset(reserved)
        self._member_reserved = (
            self.reserved | _CALL_MEMBERS | ANNOTATION_BUILTINS | TYPE_IMPORT_NAMES
        )

    def member_name(self, parameter_name: str) -> str:
        return sanitize_member_name(parameter_name, self._member_reserved)

    def function_name(self, operation_name: str) -> str:
        name = sanitize_parameter_field_name(operation_name)
        if name in _BUILTINS:
            name = f'{name}_'
        return name

    def resolve(self, operation: Operation, uses_options: bool = True) -> ResolvedNames:
        """Resolve every name the operation's generated code needs.

        Raises:
            NameCollisionError: If a derived name hits a reserved identifier,
                or two parameters resolve to the same member name.
        """
        function_name = self.function_name(operation.name)
        async_function_name = f'a{function_name}'

        options_name = builder_name = None
        if uses_options:
            options_name = options_type_name(operation.name)
            builder_name = builder_type_name(options_name)

        for identifier in (function_name, async_function_name, options_name, builder_name):
            if identifier and identifier in self.reserved:
                raise NameCollisionError(
                    operation.name, identifier, 'a reserved module-level name'
                )

        field_names: list[str] = []
        for parameter in operation.parameters:
            name = self.member_name(parameter.name)
            if name in field_names:
                raise NameCollisionError(
                    operation.name,
                    name,
                    f"another parameter of the same operation ('{parameter.name}')",
                )
            field_names.append(name)

        names = ResolvedNames(
            operation_name=operation.name,
            function_name=function_name,
            async_function_name=async_function_name,
            options_name=options_name,
            builder_name=builder_name,
            field_names=tuple(field_names),
            setter_names=tuple(field_names),
        )
        logger.debug(f'Resolved names for {operation.name}: {names}')
        return names
