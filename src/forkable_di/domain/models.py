from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from forkable_di.domain.enums import ProviderKind


class Provider(BaseModel):
    """Value object describing one named, buildable unit.

    Attributes:
        name: Unique key of the provider within a registry.
        kind: Construction rule used to produce the value.
        factory: The constant value, or the class/callable to invoke.
        dependencies: Ordered registry names passed positionally to the factory.
        is_cacheable: Whether a built value is kept for the injector's lifetime.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="The registry name of the provider.")
    kind: ProviderKind = Field(..., description="How the provider builds its value.")
    factory: Any = Field(..., description="The constant value or the invocable factory.")
    dependencies: Tuple[str, ...] = Field(
        default=(),
        description="Registry names of the dependencies, in positional argument order.",
    )
    is_cacheable: bool = Field(
        default=False,
        description="Whether the built value is memoized by the injector.",
    )

    @model_validator(mode="after")
    def check_constant_dependencies(self) -> "Provider":
        if self.kind == ProviderKind.CONSTANT and self.dependencies:
            raise ValueError(f"Constant provider {self.name!r} cannot declare dependencies")
        return self


class RegistrationOptions(BaseModel):
    """Options accepted by the registry's registration methods.

    Attributes:
        override: Permit replacing a provider already registered under the name.
        using: Maps dependency names requested by the factory to registry names.
        is_cacheable: Memoize the built value for the injector's lifetime.
        dependencies: Explicit dependency names, bypassing introspection.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    override: bool = Field(default=False, description="Allow replacing an existing provider.")
    using: Dict[str, str] = Field(
        default_factory=dict,
        description="Rewrites local dependency names to registry names.",
    )
    is_cacheable: bool = Field(default=False, description="Memoize the built value.")
    dependencies: Optional[Tuple[str, ...]] = Field(
        default=None,
        description="Explicit ordered dependency names.",
    )

    def map_dependencies(self, names: Tuple[str, ...]) -> Tuple[str, ...]:
        """Apply the ``using`` aliases to raw dependency names.

        Args:
            names: Dependency names as requested by the factory.

        Returns:
            The names under which the registry actually holds the dependencies.
        """
        return tuple(self.using.get(name, name) for name in names)
