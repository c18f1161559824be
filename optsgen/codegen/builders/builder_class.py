"""AST for the fluent builder class of an aggregated operation.

The emitted builder subclasses the runtime ``OptionsBuilder``::

    class GetTimeSeriesParamsBuilder(OptionsBuilder[GetTimeSeriesParams]):
        __slots__ = ()

        def __init__(self) -> None:
            super().__init__(GetTimeSeriesParams())

        def symbol(self, value: object) -> 'GetTimeSeriesParamsBuilder':
            self._current().symbol = str(value) if value is not None else None
            return self

        def build(self) -> GetTimeSeriesParams:
            return self._finish()
"""

import ast

from optsgen.codegen.aggregation.builder import BuilderType, Setter
from optsgen.codegen.ast_utils import (
    ImportDict,
    _argument,
    _assign,
    _attr,
    _call,
    _class,
    _docstring,
    _func,
    _name,
    _subscript,
)

__all__ = ['build_builder_class']


def _self() -> ast.arg:
    return ast.arg(arg='self')


def _setter(setter: Setter, builder_name: str, imports: ImportDict) -> ast.FunctionDef:
    if setter.accepts_convertible_string:
        annotation = _name('object')
        value = ast.IfExp(
            test=ast.Compare(
                left=_name('value'), ops=[ast.IsNot()], comparators=[ast.Constant(value=None)]
            ),
            body=_call(_name('str'), args=[_name('value')]),
            orelse=ast.Constant(value=None),
        )
    else:
        annotation = setter.field.type.annotation_ast
        for module, names in setter.field.type.annotation_imports.items():
            imports.setdefault(module, set()).update(names)
        value = _name('value')

    return _func(
        setter.name,
        args=[_self(), _argument('value', annotation)],
        body=[
            _assign(_attr(_call(_attr('self', '_current')), setter.field.name), value),
            ast.Return(value=_name('self')),
        ],
        returns=ast.Constant(value=builder_name),
    )


def build_builder_class(builder: BuilderType) -> tuple[ast.ClassDef, ImportDict]:
    """Build the builder class and the imports it needs."""
    imports: ImportDict = {'._runtime': {'OptionsBuilder'}}
    target = builder.target.name

    body: list[ast.stmt] = [
        _docstring(f'Fluent builder for ``{target}``; ``build()`` may be called once.'),
        _assign(_name('__slots__'), ast.Tuple(elts=[], ctx=ast.Load())),
        _func(
            '__init__',
            args=[_self()],
            body=[
                ast.Expr(
                    value=_call(
                        _attr(_call(_name('super')), '__init__'),
                        args=[_call(_name(target))],
                    )
                )
            ],
            returns=ast.Constant(value=None),
        ),
    ]
    body.extend(_setter(s, builder.name, imports) for s in builder.setters)
    body.append(
        _func(
            'build',
            args=[_self()],
            body=[ast.Return(value=_call(_attr('self', '_finish')))],
            returns=_name(target),
        )
    )

    bases = [_subscript('OptionsBuilder', _name(target))]
    return _class(builder.name, bases=bases, body=body), imports
