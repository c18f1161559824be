"""Call-site adaptation for aggregated and flat operation signatures.

With options, the generated function takes ``(configuration, params)`` and
its body starts by binding one local per original parameter::

    symbol = require(params.symbol, 'getTimeSeries', 'symbol')
    outputsize = params.outputsize

Everything after those bindings is the same code the flat signature uses,
so an unset optional field behaves exactly like an omitted keyword argument.
"""

import dataclasses
from collections.abc import Sequence
from typing import Literal

from optsgen.codegen.aggregation.naming import ResolvedNames
from optsgen.codegen.aggregation.options import OptionsType
from optsgen.codegen.types import MappedType
from optsgen.model import Operation, Parameter

__all__ = [
    'CONFIGURATION_ARG',
    'CONFIGURATION_TYPE',
    'OPTIONS_ARG',
    'CallBinding',
    'CallSitePlan',
    'LocalBinding',
    'SignatureInput',
    'SignaturePlan',
    'adapt',
    'baseline_signature',
]

CONFIGURATION_ARG = 'configuration'
CONFIGURATION_TYPE = 'Configuration'
OPTIONS_ARG = 'params'


@dataclasses.dataclass(frozen=True)
class CallBinding:
    operation: Operation
    uses_options: bool
    options_type: OptionsType | None = None

    def __post_init__(self):
        if self.uses_options and self.options_type is None:
            raise ValueError(
                f'Operation {self.operation.name} uses options but has no options type'
            )


@dataclasses.dataclass(frozen=True)
class SignatureInput:
    """One input of a generated function signature.

    ``type_name`` annotates the configuration and options inputs; ``type``
    annotates flat parameters.
    """

    name: str
    kind: Literal['configuration', 'options', 'parameter']
    type_name: str | None = None
    type: MappedType | None = None
    keyword_only: bool = False


@dataclasses.dataclass(frozen=True)
class SignaturePlan:
    inputs: tuple[SignatureInput, ...]

    @property
    def positional(self) -> tuple[SignatureInput, ...]:
        return tuple(i for i in self.inputs if not i.keyword_only)

    @property
    def keyword_only(self) -> tuple[SignatureInput, ...]:
        return tuple(i for i in self.inputs if i.keyword_only)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(i.name for i in self.inputs)


@dataclasses.dataclass(frozen=True)
class LocalBinding:
    """A name the request-building code reads a parameter value from.

    ``source`` is ``options`` when the value is extracted from the options
    argument, ``argument`` when it is a flat function argument.
    """

    name: str
    parameter: Parameter
    type: MappedType
    source: Literal['options', 'argument']

    @property
    def checks_presence(self) -> bool:
        return self.source == 'options' and self.parameter.required


@dataclasses.dataclass(frozen=True)
class CallSitePlan:
    signature: SignaturePlan
    local_bindings: tuple[LocalBinding, ...]
    uses_options: bool


def _configuration_input() -> SignatureInput:
    return SignatureInput(CONFIGURATION_ARG, 'configuration', type_name=CONFIGURATION_TYPE)


def baseline_signature(
    operation: Operation,
    names: ResolvedNames,
    parameter_types: Sequence[MappedType],
) -> SignaturePlan:
    """The flat signature: required parameters positional, optional ones keyword-only."""
    required: list[SignatureInput] = []
    optional: list[SignatureInput] = []
    for name, parameter, mapped in zip(
        names.field_names, operation.parameters, parameter_types, strict=True
    ):
        if parameter.required:
            required.append(SignatureInput(name, 'parameter', type=mapped))
        else:
            optional.append(
                SignatureInput(name, 'parameter', type=mapped.optional(), keyword_only=True)
            )
    return SignaturePlan(inputs=(_configuration_input(), *required, *optional))


def adapt(
    operation: Operation,
    binding: CallBinding,
    names: ResolvedNames,
    parameter_types: Sequence[MappedType],
) -> CallSitePlan:
    """Plan the signature and local bindings of the operation's function."""
    if not binding.uses_options:
        locals_ = tuple(
            LocalBinding(name, parameter, mapped, 'argument')
            for name, parameter, mapped in zip(
                names.field_names, operation.parameters, parameter_types, strict=True
            )
        )
        return CallSitePlan(
            signature=baseline_signature(operation, names, parameter_types),
            local_bindings=locals_,
            uses_options=False,
        )

    options = binding.options_type
    signature = SignaturePlan(
        inputs=(
            _configuration_input(),
            SignatureInput(OPTIONS_ARG, 'options', type_name=options.name),
        )
    )
    locals_ = tuple(
        LocalBinding(f.name, f.parameter, f.type, 'options') for f in options.fields
    )
    return CallSitePlan(signature=signature, local_bindings=locals_, uses_options=True)
