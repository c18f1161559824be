"""AST for the options class of an aggregated operation."""

import ast

from optsgen.codegen.aggregation.builder import BuilderType
from optsgen.codegen.aggregation.options import OptionsField, OptionsType
from optsgen.codegen.ast_utils import (
    ImportDict,
    _ann_assign,
    _assign,
    _call,
    _class,
    _docstring,
    _func,
    _name,
)

__all__ = ['build_options_class']


def _options_docstring(options: OptionsType) -> str:
    lines = [f'Parameters of ``{options.operation_name}``.', '']
    required = [f.name for f in options.fields if f.parameter.required]
    if required:
        lines.append(f'Required when calling the operation: {", ".join(required)}.')
    lines.append(f'Build instances with ``{options.name}.builder()``.')
    return '\n'.join(lines)


def _field_stmt(options_field: OptionsField, imports: ImportDict) -> ast.AnnAssign:
    for module, names in options_field.optional_type.annotation_imports.items():
        imports.setdefault(module, set()).update(names)

    if options_field.parameter.description:
        imports.setdefault('pydantic', set()).add('Field')
        value = _call(
            _name('Field'),
            keywords=[
                ast.keyword(arg='default', value=ast.Constant(value=None)),
                ast.keyword(
                    arg='description',
                    value=ast.Constant(value=options_field.parameter.description),
                ),
            ],
        )
    else:
        value = ast.Constant(value=None)

    return _ann_assign(
        options_field.name, options_field.optional_type.annotation_ast, value
    )


def build_options_class(
    options: OptionsType, builder: BuilderType
) -> tuple[ast.ClassDef, ImportDict]:
    """Build the options model and the imports it needs.

    Every field defaults to None, in parameter order, and the class gets a
    ``builder()`` classmethod returning a fresh builder. Assignments are
    validated, so builder setters coerce values like the constructor does.
    """
    imports: ImportDict = {'pydantic': {'BaseModel', 'ConfigDict'}}

    body: list[ast.stmt] = [
        _docstring(_options_docstring(options)),
        _assign(
            _name('model_config'),
            _call(
                _name('ConfigDict'),
                keywords=[
                    ast.keyword(arg='validate_assignment', value=ast.Constant(value=True))
                ],
            ),
        ),
    ]
    body.extend(_field_stmt(f, imports) for f in options.fields)
    body.append(
        _func(
            'builder',
            args=[ast.arg(arg='cls')],
            body=[ast.Return(value=_call(_name(builder.name)))],
            returns=ast.Constant(value=builder.name),
            decorators=[_name('classmethod')],
        )
    )

    return _class(options.name, bases=[_name('BaseModel')], body=body), imports
