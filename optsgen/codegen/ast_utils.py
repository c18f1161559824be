"""AST utilities and import collection for code generation.

This module provides helper functions for building Python AST nodes
and utilities for collecting and organizing imports during code generation.
"""

import ast
import sys
import textwrap
from collections.abc import Iterable

__all__ = [
    # AST helpers
    '_name',
    '_attr',
    '_subscript',
    '_union_expr',
    '_argument',
    '_assign',
    '_ann_assign',
    '_call',
    '_func',
    '_async_func',
    '_class',
    '_docstring',
    '_all',
    'clean_docstring',
    # Import collection
    'ImportCollector',
    'ImportDict',
]

# Type alias for import dictionaries
ImportDict = dict[str, set[str]]


def clean_docstring(docstring: str) -> str:
    return textwrap.dedent(f'\n{docstring}\n').strip()


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _subscript(generic: str, inner: ast.expr) -> ast.Subscript:
    return ast.Subscript(value=_name(generic), slice=inner, ctx=ast.Load())


def _union_expr(types: list[ast.expr]) -> ast.expr:
    # A | B | C rather than Union[A, B, C]
    if not types:
        raise ValueError('_union_expr requires at least one type')
    result = types[0]
    for t in types[1:]:
        result = ast.BinOp(left=result, op=ast.BitOr(), right=t)
    return result


def _argument(name: str, value: ast.expr | None = None) -> ast.arg:
    return ast.arg(
        arg=name,
        annotation=value,
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    elif isinstance(target, ast.Attribute):
        target.ctx = ast.Store()
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _ann_assign(
    name: str, annotation: ast.expr, value: ast.expr | None = None
) -> ast.AnnAssign:
    return ast.AnnAssign(
        target=ast.Name(id=name, ctx=ast.Store()),
        annotation=annotation,
        value=value,
        simple=1,
    )


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _arguments(
    args: list[ast.arg],
    kwonlyargs: list[ast.arg] | None,
    kw_defaults: list[ast.expr | None] | None,
    kwargs: ast.arg | None,
) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=args,
        vararg=None,
        kwarg=kwargs,
        kwonlyargs=kwonlyargs or [],
        kw_defaults=kw_defaults or [],
        defaults=[],
    )


def _func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    kwargs: ast.arg | None = None,
    kwonlyargs: list[ast.arg] | None = None,
    kw_defaults: list[ast.expr | None] | None = None,
    decorators: list[ast.expr] | None = None,
) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=name,
        args=_arguments(args, kwonlyargs, kw_defaults, kwargs),
        body=body,
        decorator_list=decorators or [],
        returns=returns,
        type_params=[],
    )


def _async_func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    kwargs: ast.arg | None = None,
    kwonlyargs: list[ast.arg] | None = None,
    kw_defaults: list[ast.expr | None] | None = None,
) -> ast.AsyncFunctionDef:
    return ast.AsyncFunctionDef(
        name=name,
        args=_arguments(args, kwonlyargs, kw_defaults, kwargs),
        body=body,
        decorator_list=[],
        returns=returns,
        type_params=[],
    )


def _class(
    name: str,
    bases: list[ast.expr],
    body: list[ast.stmt],
) -> ast.ClassDef:
    return ast.ClassDef(
        name=name,
        bases=bases,
        keywords=[],
        body=body or [ast.Pass()],
        decorator_list=[],
        type_params=[],
    )


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=clean_docstring(text)))


def _all(names: Iterable[str]) -> ast.Assign:
    return _assign(
        target=_name('__all__'),
        value=ast.Tuple(
            elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()
        ),
    )


# =============================================================================
# Import Collection
# =============================================================================


class ImportCollector:
    """Collects and manages imports for generated Python code.

    Imports are deduplicated and emitted in a stable order: standard library
    first, then third-party, then relative imports.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_imports({'typing': {'Any'}})
        >>> collector.add_import('pydantic', 'BaseModel')
        >>> imports = collector.to_ast()
    """

    def __init__(self):
        self._imports: ImportDict = {}

    def add_imports(self, imports: ImportDict) -> None:
        for module, names in imports.items():
            if module == 'builtins':
                continue
            self._imports.setdefault(module, set()).update(names)

    def add_import(self, module: str, name: str) -> None:
        self.add_imports({module: {name}})

    def _get_import_category(self, module: str) -> int:
        """0 for standard library, 1 for third-party, 2 for relative imports."""
        if module.startswith('.'):
            return 2

        base_module = module.split('.')[0]
        if base_module in sys.stdlib_module_names:
            return 0

        return 1

    def to_ast(self) -> list[ast.ImportFrom]:
        import_stmts = []

        sorted_modules = sorted(
            self._imports.items(),
            key=lambda x: (self._get_import_category(x[0]), x[0]),
        )

        for module, names in sorted_modules:
            if module.startswith('.'):
                level = len(module) - len(module.lstrip('.'))
                import_module = module.lstrip('.') or None
            else:
                level = 0
                import_module = module

            import_stmts.append(
                ast.ImportFrom(
                    module=import_module,
                    names=[ast.alias(name=name, asname=None) for name in sorted(names)],
                    level=level,
                )
            )
        return import_stmts
