"""Type mapping from declared type references to Python annotations.

The TypeMapper is the single set of type-mapping rules for the generator:
model fields, flat endpoint arguments and aggregated options fields all go
through it, so a parameter keeps the same Python type whichever shape its
operation is emitted in.
"""

import ast
import dataclasses
from collections.abc import Iterable, Mapping

from optsgen.codegen.ast_utils import ImportDict, _name, _subscript, _union_expr
from optsgen.codegen.utils import sanitize_identifier
from optsgen.exceptions import UnmappableTypeError
from optsgen.model import SchemaDefinition, TypeRef

__all__ = [
    'ANNOTATION_BUILTINS',
    'TYPE_IMPORT_NAMES',
    'MappedType',
    'TypeMapper',
    'merge_imports',
]

# (type, format) -> (module, name); module is None for builtins
_PRIMITIVE_TYPE_MAP: dict[tuple[str, str | None], tuple[str | None, str]] = {
    ('string', None): (None, 'str'),
    ('string', 'date-time'): ('datetime', 'datetime'),
    ('string', 'date'): ('datetime', 'date'),
    ('string', 'uuid'): ('uuid', 'UUID'),
    ('string', 'binary'): (None, 'bytes'),
    ('string', 'byte'): (None, 'bytes'),
    ('integer', None): (None, 'int'),
    ('integer', 'int32'): (None, 'int'),
    ('integer', 'int64'): (None, 'int'),
    ('number', None): (None, 'float'),
    ('number', 'float'): (None, 'float'),
    ('number', 'double'): (None, 'float'),
    ('boolean', None): (None, 'bool'),
}

# Builtins and imported names a mapped annotation can refer to; generated
# members must not shadow them.
ANNOTATION_BUILTINS = frozenset(
    {name for module, name in _PRIMITIVE_TYPE_MAP.values() if module is None}
    | {'dict', 'list'}
)
TYPE_IMPORT_NAMES = frozenset(
    {name for module, name in _PRIMITIVE_TYPE_MAP.values() if module}
    | {'Any', 'Literal'}
)


@dataclasses.dataclass(frozen=True)
class MappedType:
    """A declared type resolved to a Python annotation.

    Attributes:
        annotation_ast: The annotation expression.
        imports: Imports the annotation needs, keyed by module.
        dependencies: Names of generated models the annotation refers to.
        is_string_like: True for plain string scalars.
        nullable: True when the annotation already admits None.
    """

    annotation_ast: ast.expr
    imports: Mapping[str, frozenset[str]] = dataclasses.field(default_factory=dict)
    dependencies: frozenset[str] = frozenset()
    is_string_like: bool = False
    nullable: bool = False

    @property
    def is_any(self) -> bool:
        return isinstance(self.annotation_ast, ast.Name) and self.annotation_ast.id == 'Any'

    @property
    def annotation_imports(self) -> ImportDict:
        return {module: set(names) for module, names in self.imports.items()}

    def optional(self) -> 'MappedType':
        """This type widened with None, unless it already admits None."""
        if self.nullable or self.is_any:
            return self
        return dataclasses.replace(
            self,
            annotation_ast=_union_expr([self.annotation_ast, ast.Constant(value=None)]),
            nullable=True,
        )

    def render(self) -> str:
        return ast.unparse(self.annotation_ast)


def _merge(*import_maps: Mapping[str, Iterable[str]]) -> dict[str, frozenset[str]]:
    merged: dict[str, set[str]] = {}
    for imports in import_maps:
        for module, names in imports.items():
            merged.setdefault(module, set()).update(names)
    return {module: frozenset(names) for module, names in merged.items()}


class TypeMapper:
    """Maps TypeRef values to MappedType values.

    Example:
        >>> mapper = TypeMapper({'Pet': SchemaDefinition()})
        >>> mapper.map(TypeRef(type='array', items=TypeRef(ref='Pet'))).render()
        'list[Pet]'
    """

    def __init__(self, schemas: Mapping[str, SchemaDefinition] | None = None):
        self._model_names = {
            name: sanitize_identifier(name) for name in (schemas or {})
        }

    @property
    def model_names(self) -> frozenset[str]:
        return frozenset(self._model_names.values())

    def model_name(self, schema_name: str) -> str:
        return self._model_names[schema_name]

    def map(self, type_ref: TypeRef) -> MappedType:
        mapped = self._map(type_ref)
        if type_ref.nullable:
            return mapped.optional()
        return mapped

    def _map(self, type_ref: TypeRef) -> MappedType:
        if type_ref.ref is not None:
            return self._map_ref(type_ref)

        if type_ref.enum:
            return self._map_enum(type_ref)

        if type_ref.type is None:
            return MappedType(_name('Any'), imports=_merge({'typing': {'Any'}}))

        if type_ref.type == 'array':
            if type_ref.items is None:
                raise UnmappableTypeError(type_ref.describe(), 'array without items')
            inner = self.map(type_ref.items)
            return MappedType(
                _subscript('list', inner.annotation_ast),
                imports=inner.imports,
                dependencies=inner.dependencies,
            )

        if type_ref.type == 'object':
            if type_ref.additional_properties is None:
                value = MappedType(_name('Any'), imports=_merge({'typing': {'Any'}}))
            else:
                value = self.map(type_ref.additional_properties)
            return MappedType(
                _subscript(
                    'dict',
                    ast.Tuple(elts=[_name('str'), value.annotation_ast], ctx=ast.Load()),
                ),
                imports=value.imports,
                dependencies=value.dependencies,
            )

        return self._map_primitive(type_ref)

    def _map_ref(self, type_ref: TypeRef) -> MappedType:
        name = type_ref.ref.rsplit('/', 1)[-1]
        if name not in self._model_names:
            raise UnmappableTypeError(type_ref.describe(), 'unknown schema')
        model_name = self._model_names[name]
        return MappedType(_name(model_name), dependencies=frozenset({model_name}))

    def _map_enum(self, type_ref: TypeRef) -> MappedType:
        values = [ast.Constant(value=value) for value in type_ref.enum]
        literal = _subscript(
            'Literal',
            values[0] if len(values) == 1 else ast.Tuple(elts=values, ctx=ast.Load()),
        )
        return MappedType(literal, imports=_merge({'typing': {'Literal'}}))

    def _map_primitive(self, type_ref: TypeRef) -> MappedType:
        key = (type_ref.type, type_ref.format)
        if key not in _PRIMITIVE_TYPE_MAP:
            # unknown formats fall back to the bare type
            key = (type_ref.type, None)
        if key not in _PRIMITIVE_TYPE_MAP:
            raise UnmappableTypeError(type_ref.describe(), 'unsupported type')

        module, name = _PRIMITIVE_TYPE_MAP[key]
        return MappedType(
            _name(name),
            imports=_merge({module: {name}}) if module else {},
            is_string_like=name == 'str',
        )


def merge_imports(types: Iterable[MappedType]) -> ImportDict:
    merged: ImportDict = {}
    for mapped in types:
        for module, names in mapped.imports.items():
            merged.setdefault(module, set()).update(names)
    return merged
