from enum import Enum


class ProviderKind(str, Enum):
    """Defines how a provider produces its value.

    Attributes:
        CONSTANT: The stored value itself is the result.
        CONSTRUCTOR: A class instantiated with the resolved dependencies.
        FUNCTION: A callable invoked with the resolved dependencies.
    """

    CONSTANT = "constant"
    CONSTRUCTOR = "constructor"
    FUNCTION = "function"

    def __str__(self) -> str:
        return self.value
