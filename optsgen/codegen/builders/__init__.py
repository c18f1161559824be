"""Builders turning render contexts into AST nodes for the endpoints module."""

from optsgen.codegen.builders.builder_class import build_builder_class
from optsgen.codegen.builders.endpoint_factory import EndpointFunctionFactory
from optsgen.codegen.builders.options_class import build_options_class
from optsgen.codegen.builders.parameter_builder import ParameterASTBuilder
from optsgen.codegen.builders.signature_builder import (
    FunctionSignature,
    FunctionSignatureBuilder,
)

__all__ = [
    # Aggregated types
    'build_builder_class',
    'build_options_class',
    # Request arguments
    'ParameterASTBuilder',
    # Signatures
    'FunctionSignature',
    'FunctionSignatureBuilder',
    # Endpoint functions
    'EndpointFunctionFactory',
]
