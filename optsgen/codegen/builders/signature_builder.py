"""Function signature building from a call-site signature plan."""

import ast
from dataclasses import dataclass, field
from typing import Self

from optsgen.codegen.aggregation.call_site import SignatureInput, SignaturePlan
from optsgen.codegen.ast_utils import ImportDict, _argument, _name

__all__ = ['FunctionSignature', 'FunctionSignatureBuilder']


@dataclass
class FunctionSignature:
    """The arguments portion of a generated function definition.

    Attributes:
        args: Positional arguments.
        kwonlyargs: Keyword-only arguments.
        kw_defaults: Default values for keyword-only arguments.
        imports: Imports needed by the argument annotations.
    """

    args: list[ast.arg] = field(default_factory=list)
    kwonlyargs: list[ast.arg] = field(default_factory=list)
    kw_defaults: list[ast.expr | None] = field(default_factory=list)
    imports: ImportDict = field(default_factory=dict)


class FunctionSignatureBuilder:
    """Fluent builder turning signature inputs into ``ast.arg`` nodes.

    Example:
        >>> signature = FunctionSignatureBuilder().add_plan(plan).build()
        >>> # Use signature.args, signature.kwonlyargs, etc.
    """

    def __init__(self):
        self._args: list[ast.arg] = []
        self._kwonlyargs: list[ast.arg] = []
        self._kw_defaults: list[ast.expr | None] = []
        self._imports: ImportDict = {}

    def _merge_imports(self, imports: ImportDict) -> None:
        for module, names in imports.items():
            self._imports.setdefault(module, set()).update(names)

    def add_input(self, signature_input: SignatureInput) -> Self:
        """Add one input.

        Keyword-only inputs default to None; the configuration and options
        inputs are annotated with their type names.
        """
        if signature_input.type is not None:
            annotation = signature_input.type.annotation_ast
            self._merge_imports(signature_input.type.annotation_imports)
        elif signature_input.type_name is not None:
            annotation = _name(signature_input.type_name)
        else:
            annotation = _name('Any')
            self._merge_imports({'typing': {'Any'}})

        arg = _argument(signature_input.name, annotation)
        if signature_input.keyword_only:
            self._kwonlyargs.append(arg)
            self._kw_defaults.append(ast.Constant(value=None))
        else:
            self._args.append(arg)
        return self

    def add_plan(self, plan: SignaturePlan) -> Self:
        for signature_input in plan.inputs:
            self.add_input(signature_input)
        return self

    def build(self) -> FunctionSignature:
        return FunctionSignature(
            args=self._args.copy(),
            kwonlyargs=self._kwonlyargs.copy(),
            kw_defaults=self._kw_defaults.copy(),
            imports={module: set(names) for module, names in self._imports.items()},
        )
