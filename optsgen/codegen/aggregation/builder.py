import dataclasses

from optsgen.codegen.aggregation.naming import builder_type_name
from optsgen.codegen.aggregation.options import OptionsField, OptionsType

__all__ = ['BuilderType', 'Setter', 'synthesize_builder']


@dataclasses.dataclass(frozen=True)
class Setter:
    """A chainable setter writing one options field.

    Setters for plain string fields accept any value and store its ``str()``,
    passing None through; all others take the field's concrete type.
    """

    field: OptionsField
    accepts_convertible_string: bool

    @property
    def name(self) -> str:
        return self.field.name


@dataclasses.dataclass(frozen=True)
class BuilderType:
    """Fluent builder bound to one options type.

    The emitted class has one setter per field, in field order, a
    zero-argument ``build()`` that hands over the options value and retires
    the builder, and is reachable through ``<Options>.builder()``.
    """

    name: str
    target: OptionsType
    setters: tuple[Setter, ...]

    @property
    def setter_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.setters)


def synthesize_builder(options: OptionsType) -> BuilderType:
    setters = tuple(
        Setter(field=f, accepts_convertible_string=f.type.is_string_like)
        for f in options.fields
    )
    return BuilderType(name=builder_type_name(options.name), target=options, setters=setters)
