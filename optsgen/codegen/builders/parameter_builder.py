"""Request argument AST building.

Every expression built here reads parameter values from the call-site
locals, so the same request code serves flat and aggregated signatures.
"""

import ast
import re
from collections.abc import Sequence

from optsgen.codegen.aggregation.call_site import LocalBinding
from optsgen.codegen.ast_utils import _call, _name
from optsgen.model import CollectionFormat, ParameterLocation

__all__ = ['ParameterASTBuilder']

_PLACEHOLDER = re.compile(r'\{([^}]+)\}')


class ParameterASTBuilder:
    """Builds the request arguments of a generated endpoint function.

    Example:
        >>> ParameterASTBuilder.build_query_params(bindings)  # {'symbol': symbol, ...}
        >>> ParameterASTBuilder.build_path_expr('/quote/{symbol}', bindings)
    """

    @staticmethod
    def value_expr(binding: LocalBinding) -> ast.expr:
        """The wire value of a binding.

        Arrays with a collection format other than ``multi`` are joined by
        the runtime's ``format_collection``.
        """
        collection_format = binding.parameter.collection_format
        if (
            collection_format in (None, CollectionFormat.MULTI)
            or binding.parameter.type.type != 'array'
        ):
            return _name(binding.name)
        return _call(
            _name('format_collection'),
            args=[_name(binding.name), ast.Constant(value=collection_format.value)],
        )

    @staticmethod
    def _located(
        bindings: Sequence[LocalBinding], location: ParameterLocation
    ) -> list[LocalBinding]:
        return [b for b in bindings if b.parameter.location == location]

    @staticmethod
    def _dict(bindings: list[LocalBinding]) -> ast.Dict | None:
        if not bindings:
            return None
        return ast.Dict(
            keys=[ast.Constant(value=b.parameter.name) for b in bindings],
            values=[ParameterASTBuilder.value_expr(b) for b in bindings],
        )

    @staticmethod
    def build_query_params(bindings: Sequence[LocalBinding]) -> ast.Dict | None:
        return ParameterASTBuilder._dict(
            ParameterASTBuilder._located(bindings, ParameterLocation.QUERY)
        )

    @staticmethod
    def build_header_params(bindings: Sequence[LocalBinding]) -> ast.Dict | None:
        return ParameterASTBuilder._dict(
            ParameterASTBuilder._located(bindings, ParameterLocation.HEADER)
        )

    @staticmethod
    def build_form_params(bindings: Sequence[LocalBinding]) -> ast.Dict | None:
        return ParameterASTBuilder._dict(
            ParameterASTBuilder._located(bindings, ParameterLocation.FORM)
        )

    @staticmethod
    def build_path_expr(path: str, bindings: Sequence[LocalBinding]) -> ast.expr:
        """Build an f-string or constant for the request path.

        Placeholders like ``{symbol}`` are matched against the wire names of
        path parameters. Placeholders without a parameter stay literal.
        """
        path_bindings = {
            b.parameter.name: b
            for b in ParameterASTBuilder._located(bindings, ParameterLocation.PATH)
        }
        if not path_bindings:
            return ast.Constant(value=path)

        parts = _PLACEHOLDER.split(path)
        values: list[ast.expr] = []
        literal = ''
        for i, part in enumerate(parts):
            if i % 2 == 0:
                literal += part
            elif part in path_bindings:
                if literal:
                    values.append(ast.Constant(value=literal))
                    literal = ''
                values.append(
                    ast.FormattedValue(
                        value=ParameterASTBuilder.value_expr(path_bindings[part]),
                        conversion=-1,
                    )
                )
            else:
                literal += f'{{{part}}}'
        if literal:
            values.append(ast.Constant(value=literal))

        if not any(isinstance(v, ast.FormattedValue) for v in values):
            return ast.Constant(value=path)
        return ast.JoinedStr(values=values)

    @staticmethod
    def build_body_expr(bindings: Sequence[LocalBinding]) -> ast.expr | None:
        """The JSON body argument, or None when the operation has no body.

        Raises:
            ValueError: If more than one parameter is a body parameter.
        """
        body = ParameterASTBuilder._located(bindings, ParameterLocation.BODY)
        if not body:
            return None
        if len(body) > 1:
            raise ValueError(
                'multiple body parameters: '
                + ', '.join(b.parameter.name for b in body)
            )
        return _name(body[0].name)
