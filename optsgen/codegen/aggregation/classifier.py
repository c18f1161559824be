from optsgen.model import Operation

__all__ = ['classify']


def classify(operation: Operation) -> bool:
    """Whether the operation's parameters are aggregated into an options value.

    Every operation with at least one parameter qualifies; there is no
    per-operation opt-out. Operations without parameters keep their flat
    signature.
    """
    return len(operation.parameters) > 0
