"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from forkable_di.domain.enums import ProviderKind
from forkable_di.domain.models import Provider, RegistrationOptions


class TestProvider:
    """Test cases for the Provider model."""

    def test_create_function_provider(self):
        """Test creating a function provider with dependencies."""

        def greet(port):
            return f"listening on {port}"

        provider = Provider(
            name="greeting",
            kind=ProviderKind.FUNCTION,
            factory=greet,
            dependencies=["port"],
            is_cacheable=True,
        )

        assert provider.name == "greeting"
        assert provider.kind == ProviderKind.FUNCTION
        assert provider.factory is greet
        assert provider.dependencies == ("port",)
        assert provider.is_cacheable is True

    def test_defaults(self):
        """Test default dependencies and cacheability."""
        provider = Provider(name="port", kind=ProviderKind.CONSTANT, factory=8080)

        assert provider.dependencies == ()
        assert provider.is_cacheable is False

    def test_constant_value_kept_by_identity(self):
        """Test that constant values are stored without copying."""
        value = {"host": "localhost"}

        provider = Provider(name="settings", kind=ProviderKind.CONSTANT, factory=value)

        assert provider.factory is value

    def test_provider_is_frozen(self):
        """Test that providers cannot be modified after creation."""
        provider = Provider(name="port", kind=ProviderKind.CONSTANT, factory=8080)

        with pytest.raises(ValidationError):
            provider.name = "other"

    def test_constant_with_dependencies_is_rejected(self):
        """Test that constants cannot declare dependencies."""
        with pytest.raises(ValidationError, match="cannot declare dependencies"):
            Provider(name="port", kind=ProviderKind.CONSTANT, factory=8080, dependencies=["x"])

    def test_empty_name_is_rejected(self):
        """Test that provider names cannot be empty."""
        with pytest.raises(ValidationError):
            Provider(name="", kind=ProviderKind.CONSTANT, factory=1)

    def test_kind_from_string(self):
        """Test that the kind can be given as its string value."""
        provider = Provider(name="f", kind="function", factory=lambda: 1)

        assert provider.kind is ProviderKind.FUNCTION


class TestRegistrationOptions:
    """Test cases for RegistrationOptions."""

    def test_defaults(self):
        """Test the default options."""
        options = RegistrationOptions()

        assert options.override is False
        assert options.using == {}
        assert options.is_cacheable is False
        assert options.dependencies is None

    def test_map_dependencies_with_aliases(self):
        """Test that aliases rewrite names and keep the others."""
        options = RegistrationOptions(using={"db": "primary_db"})

        assert options.map_dependencies(("db", "cache")) == ("primary_db", "cache")

    def test_map_dependencies_keeps_order(self):
        """Test that mapping preserves the positional order."""
        options = RegistrationOptions(using={"b": "y", "a": "x"})

        assert options.map_dependencies(("a", "b", "c")) == ("x", "y", "c")

    def test_using_must_map_strings(self):
        """Test that non-string alias targets are rejected."""
        with pytest.raises(ValidationError):
            RegistrationOptions(using={"db": 3})

    def test_unknown_option_is_rejected(self):
        """Test that unknown options are rejected."""
        with pytest.raises(ValidationError):
            RegistrationOptions(lifetime="singleton")

    def test_options_are_frozen(self):
        """Test that options cannot be modified after creation."""
        options = RegistrationOptions()

        with pytest.raises(ValidationError):
            options.override = True
