"""Pydantic model generation for document schemas."""

import ast
import logging
from collections.abc import Mapping

from optsgen.codegen.ast_utils import (
    ImportCollector,
    _all,
    _ann_assign,
    _assign,
    _attr,
    _call,
    _class,
    _docstring,
    _name,
)
from optsgen.codegen.types import ANNOTATION_BUILTINS, TYPE_IMPORT_NAMES, TypeMapper
from optsgen.codegen.utils import sanitize_member_name
from optsgen.exceptions import UnmappableTypeError
from optsgen.model import SchemaDefinition

logger = logging.getLogger(__name__)

__all__ = ['ModelGenerator']


class ModelGenerator:
    """Builds the models module from the document's schema definitions.

    Every schema becomes a ``BaseModel`` subclass whose fields keep the wire
    name as alias. The module uses postponed annotations and finishes with a
    ``model_rebuild()`` per model so models may refer to each other in any
    order, cycles included.
    """

    def __init__(self, schemas: Mapping[str, SchemaDefinition], type_mapper: TypeMapper):
        self.schemas = schemas
        self.type_mapper = type_mapper
        self._reserved = (
            ANNOTATION_BUILTINS
            | TYPE_IMPORT_NAMES
            | {'BaseModel', 'ConfigDict', 'Field'}
            | type_mapper.model_names
        )

    def build_model(
        self, schema_name: str, schema: SchemaDefinition, imports: ImportCollector
    ) -> ast.ClassDef:
        imports.add_import('pydantic', 'BaseModel')
        imports.add_import('pydantic', 'ConfigDict')
        imports.add_import('pydantic', 'Field')

        class_name = self.type_mapper.model_name(schema_name)
        body: list[ast.stmt] = []
        if schema.description:
            body.append(_docstring(schema.description))
        body.append(
            _assign(
                _name('model_config'),
                _call(
                    _name('ConfigDict'),
                    keywords=[ast.keyword(arg='populate_by_name', value=ast.Constant(value=True))],
                ),
            )
        )

        seen: set[str] = set()
        for property_name, type_ref in schema.properties.items():
            try:
                mapped = self.type_mapper.map(type_ref)
            except UnmappableTypeError as e:
                raise e.for_parameter(schema_name, property_name) from e

            field_name = sanitize_member_name(property_name, self._reserved)
            if field_name in seen:
                field_name = f'{field_name}_'
            seen.add(field_name)

            keywords = [ast.keyword(arg='alias', value=ast.Constant(value=property_name))]
            if property_name not in schema.required:
                mapped = mapped.optional()
                keywords.insert(0, ast.keyword(arg='default', value=ast.Constant(value=None)))

            imports.add_imports(mapped.annotation_imports)
            body.append(
                _ann_assign(
                    field_name,
                    mapped.annotation_ast,
                    _call(_name('Field'), keywords=keywords),
                )
            )

        return _class(class_name, [_name('BaseModel')], body)

    def build_module(self) -> tuple[list[ast.stmt], list[str]]:
        """Build the statements of the models module.

        Returns:
            A tuple of (module body, exported model names).
        """
        imports = ImportCollector()
        classes: list[ast.stmt] = []
        names: list[str] = []

        for schema_name, schema in self.schemas.items():
            class_def = self.build_model(schema_name, schema, imports)
            classes.append(class_def)
            names.append(class_def.name)
            logger.debug(f'Generated model {class_def.name} from schema {schema_name}')

        rebuilds = [
            ast.Expr(value=_call(_attr(_name(name), 'model_rebuild')))
            for name in names
        ]

        body: list[ast.stmt] = [
            ast.ImportFrom(
                module='__future__',
                names=[ast.alias(name='annotations', asname=None)],
                level=0,
            ),
            *imports.to_ast(),
            _all(sorted(names)),
            *classes,
            *rebuilds,
        ]
        return body, names
