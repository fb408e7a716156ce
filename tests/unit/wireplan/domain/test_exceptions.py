"""Unit tests for domain exceptions."""

import pytest

from wireplan.domain.exceptions import CatalogError, TypeRefSyntaxError, WireplanException


class TestWireplanException:
    """Test cases for the base WireplanException class."""

    def test_wireplan_exception_is_exception(self):
        """Test that WireplanException inherits from Exception."""
        assert issubclass(WireplanException, Exception)

    def test_wireplan_exception_can_be_raised(self):
        """Test that WireplanException can be raised with a message."""
        with pytest.raises(WireplanException, match="Test error"):
            raise WireplanException("Test error")


class TestCatalogError:
    """Test cases for the CatalogError class."""

    def test_catalog_error_inherits_from_wireplan_exception(self):
        """Test that CatalogError inherits from WireplanException."""
        assert issubclass(CatalogError, WireplanException)

    def test_catalog_error_with_reason(self):
        """Test CatalogError message and attributes with a reason."""
        error = CatalogError("app.UserService", "duplicate component identity")

        assert error.identity == "app.UserService"
        assert error.reason == "duplicate component identity"
        assert str(error) == "Invalid catalog entry: 'app.UserService'. Reason: duplicate component identity"

    def test_catalog_error_without_reason(self):
        """Test CatalogError message without a reason."""
        error = CatalogError("app.UserService")

        assert error.reason is None
        assert str(error) == "Invalid catalog entry: 'app.UserService'"


class TestTypeRefSyntaxError:
    """Test cases for the TypeRefSyntaxError class."""

    def test_type_ref_syntax_error_attributes(self):
        """Test that TypeRefSyntaxError keeps the text and position."""
        error = TypeRefSyntaxError("app.Repo[", 9)

        assert isinstance(error, WireplanException)
        assert error.text == "app.Repo["
        assert error.position == 9
        assert "position 9" in str(error)
