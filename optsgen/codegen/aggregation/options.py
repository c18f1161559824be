import dataclasses
from collections.abc import Sequence

from optsgen.codegen.aggregation.naming import ResolvedNames
from optsgen.codegen.types import MappedType
from optsgen.model import Operation, Parameter

__all__ = ['OptionsField', 'OptionsType', 'synthesize_options']


@dataclasses.dataclass(frozen=True)
class OptionsField:
    """One field of an aggregated options type.

    ``type`` is the parameter's mapped type; the field itself is always
    optional, so the emitted annotation is ``optional_type``.
    """

    name: str
    parameter: Parameter
    type: MappedType

    @property
    def optional_type(self) -> MappedType:
        return self.type.optional()


@dataclasses.dataclass(frozen=True)
class OptionsType:
    name: str
    operation_name: str
    fields: tuple[OptionsField, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def field(self, name: str) -> OptionsField:
        for options_field in self.fields:
            if options_field.name == name:
                return options_field
        raise KeyError(name)


def synthesize_options(
    operation: Operation,
    names: ResolvedNames,
    parameter_types: Sequence[MappedType],
) -> OptionsType:
    """Derive the options type that replaces the operation's parameter list.

    Fields follow parameter declaration order one-to-one. Required and
    optional parameters are wrapped the same way.

    Args:
        operation: An operation with at least one parameter.
        names: The operation's resolved names.
        parameter_types: Mapped types aligned with ``operation.parameters``.
    """
    if not operation.parameters:
        raise ValueError(f'Operation {operation.name} has no parameters to aggregate')
    if names.options_name is None:
        raise ValueError(f'Operation {operation.name} has no options type name')

    fields = tuple(
        OptionsField(name=field_name, parameter=parameter, type=mapped)
        for field_name, parameter, mapped in zip(
            names.field_names, operation.parameters, parameter_types, strict=True
        )
    )
    return OptionsType(
        name=names.options_name, operation_name=operation.name, fields=fields
    )
