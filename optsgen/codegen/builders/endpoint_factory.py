"""Endpoint function factory.

Builds the sync and async functions of one operation from its render
context. Both variants share the signature, the local bindings and the
request arguments; they differ only in the runtime helper they call.
"""

import ast

from optsgen.codegen.aggregation.call_site import OPTIONS_ARG, LocalBinding
from optsgen.codegen.aggregation.transform import RenderContext
from optsgen.codegen.ast_utils import (
    ImportDict,
    _assign,
    _async_func,
    _attr,
    _call,
    _docstring,
    _func,
    _name,
)
from optsgen.codegen.builders.parameter_builder import ParameterASTBuilder
from optsgen.codegen.builders.signature_builder import FunctionSignatureBuilder
from optsgen.codegen.types import MappedType
from optsgen.exceptions import EndpointGenerationError

__all__ = ['EndpointFunctionFactory']

MODELS_MODULE = '.models'
RUNTIME_MODULE = '._runtime'


def _merge(target: ImportDict, imports: ImportDict) -> None:
    for module, names in imports.items():
        target.setdefault(module, set()).update(names)


class EndpointFunctionFactory:
    """Factory for the endpoint functions of one operation.

    Example:
        >>> factory = EndpointFunctionFactory(context)
        >>> functions, imports = factory.build()
    """

    def __init__(self, context: RenderContext, models_module: str = MODELS_MODULE):
        self.context = context
        self.models_module = models_module
        self._imports: ImportDict = {}

    def _add_import(self, module: str, name: str) -> None:
        self._imports.setdefault(module, set()).add(name)

    def _add_type(self, mapped: MappedType | None) -> None:
        if mapped is None:
            return
        _merge(self._imports, mapped.annotation_imports)
        for dependency in mapped.dependencies:
            self._add_import(self.models_module, dependency)

    def build(self) -> tuple[list[ast.stmt], ImportDict]:
        """Build the sync and the async function.

        Raises:
            EndpointGenerationError: If the request cannot be expressed, e.g.
                the operation declares more than one body parameter.
        """
        self._imports = {}
        operation = self.context.operation
        try:
            request_kwargs = self._request_keywords()
        except ValueError as e:
            raise EndpointGenerationError(
                operation.name, operation.method, operation.path, cause=e
            ) from e

        sync_fn = self._build_function(request_kwargs, is_async=False)
        async_fn = self._build_function(request_kwargs, is_async=True)
        return [sync_fn, async_fn], self._imports

    def _build_function(
        self, request_kwargs: list[ast.keyword], is_async: bool
    ) -> ast.FunctionDef | ast.AsyncFunctionDef:
        names = self.context.names
        signature = FunctionSignatureBuilder().add_plan(self.context.signature).build()
        _merge(self._imports, signature.imports)
        self._add_import(RUNTIME_MODULE, 'Configuration')
        for binding in self.context.local_bindings:
            self._add_type(binding.type)

        helper = 'request_async' if is_async else 'request_sync'
        self._add_import(RUNTIME_MODULE, helper)

        call: ast.expr = _call(
            _name(helper),
            args=[
                _name('configuration'),
                ast.Constant(value=self.context.operation.method.lower()),
                ParameterASTBuilder.build_path_expr(
                    self.context.operation.path, self.context.local_bindings
                ),
            ],
            keywords=request_kwargs,
        )
        if is_async:
            call = ast.Await(value=call)

        body: list[ast.stmt] = [_docstring(self._docstring())]
        body.extend(self._bind_locals())
        body.append(ast.Return(value=call))

        returns = (
            self.context.return_type.annotation_ast
            if self.context.return_type
            else ast.Constant(value=None)
        )
        builder = _async_func if is_async else _func
        return builder(
            name=names.async_function_name if is_async else names.function_name,
            args=signature.args,
            body=body,
            returns=returns,
            kwonlyargs=signature.kwonlyargs,
            kw_defaults=signature.kw_defaults,
        )

    def _bind_locals(self) -> list[ast.stmt]:
        if not self.context.uses_options:
            return []
        return [self._bind_local(b) for b in self.context.local_bindings]

    def _bind_local(self, binding: LocalBinding) -> ast.Assign:
        value: ast.expr = _attr(OPTIONS_ARG, binding.name)
        if binding.checks_presence:
            self._add_import(RUNTIME_MODULE, 'require')
            value = _call(
                _name('require'),
                args=[
                    value,
                    ast.Constant(value=self.context.operation.name),
                    ast.Constant(value=binding.parameter.name),
                ],
            )
        return _assign(_name(binding.name), value)

    def _request_keywords(self) -> list[ast.keyword]:
        bindings = self.context.local_bindings
        if any(isinstance(ParameterASTBuilder.value_expr(b), ast.Call) for b in bindings):
            self._add_import(RUNTIME_MODULE, 'format_collection')

        keywords: list[ast.keyword] = []
        for arg, value in (
            ('params', ParameterASTBuilder.build_query_params(bindings)),
            ('headers', ParameterASTBuilder.build_header_params(bindings)),
            ('data', ParameterASTBuilder.build_form_params(bindings)),
            ('json', ParameterASTBuilder.build_body_expr(bindings)),
        ):
            if value is not None:
                keywords.append(ast.keyword(arg=arg, value=value))

        self._add_type(self.context.return_type)
        self._add_type(self.context.error_type)
        if self.context.return_type is not None:
            keywords.append(
                ast.keyword(
                    arg='response_model', value=self.context.return_type.annotation_ast
                )
            )
        if self.context.error_type is not None:
            keywords.append(
                ast.keyword(arg='error_model', value=self.context.error_type.annotation_ast)
            )
        return keywords

    def _docstring(self) -> str:
        operation = self.context.operation
        lines = [operation.description or f'{operation.method.upper()} {operation.path}']
        if self.context.uses_options:
            options = self.context.options_type.name
            lines += [
                '',
                'Args:',
                '    configuration: Connection settings.',
                f'    params: Parameters, usually made with ``{options}.builder()``.',
                '',
                'Raises:',
            ]
            if any(b.checks_presence for b in self.context.local_bindings):
                lines.append('    MissingParameterError: If a required parameter is unset.')
            lines.append('    ApiError: If the API answers with an error status.')
        return '\n'.join(lines)
