"""Parameter aggregation and builder synthesis.

Operations with at least one parameter get an options type holding one
optional field per parameter and a fluent builder for it; the generated
function then takes the options value instead of the individual
parameters. Operations without parameters keep their flat signature.
"""

from optsgen.codegen.aggregation.builder import BuilderType, Setter, synthesize_builder
from optsgen.codegen.aggregation.call_site import (
    CallBinding,
    CallSitePlan,
    LocalBinding,
    SignatureInput,
    SignaturePlan,
    adapt,
    baseline_signature,
)
from optsgen.codegen.aggregation.classifier import classify
from optsgen.codegen.aggregation.naming import (
    NamingResolver,
    ResolvedNames,
    builder_type_name,
    options_type_name,
)
from optsgen.codegen.aggregation.options import (
    OptionsField,
    OptionsType,
    synthesize_options,
)
from optsgen.codegen.aggregation.transform import (
    OperationFailure,
    OperationTransformer,
    RenderContext,
    TransformReport,
)

__all__ = [
    'BuilderType',
    'CallBinding',
    'CallSitePlan',
    'LocalBinding',
    'NamingResolver',
    'OperationFailure',
    'OperationTransformer',
    'OptionsField',
    'OptionsType',
    'RenderContext',
    'ResolvedNames',
    'Setter',
    'SignatureInput',
    'SignaturePlan',
    'TransformReport',
    'adapt',
    'baseline_signature',
    'builder_type_name',
    'classify',
    'options_type_name',
    'synthesize_builder',
    'synthesize_options',
]
