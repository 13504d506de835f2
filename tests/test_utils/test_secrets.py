"""Tests for secrets validation module."""

from release_manager.utils.secrets import (
    REQUIRED_SECRETS,
    SecretDefinition,
    validate_secrets,
)


class TestSecretDefinition:
    """Tests for SecretDefinition dataclass."""

    def test_secret_definition_structure(self):
        """SecretDefinition should have expected fields."""
        secret = SecretDefinition(
            name="Test Token",
            env_var="TEST_TOKEN",
            required_for=["publish"],
            description="For testing"
        )
        assert secret.name == "Test Token"
        assert secret.env_var == "TEST_TOKEN"
        assert secret.required_for == ["publish"]
        assert secret.description == "For testing"


class TestRequiredSecrets:
    """Tests for the REQUIRED_SECRETS list."""

    def test_required_secrets_have_valid_structure(self):
        """Each secret in REQUIRED_SECRETS should have required fields."""
        for secret in REQUIRED_SECRETS:
            assert isinstance(secret, SecretDefinition)
            assert secret.name
            assert secret.env_var
            assert isinstance(secret.required_for, list)
            assert secret.description

    def test_github_token_in_list(self):
        """GitHub token should be in required secrets."""
        env_vars = [s.env_var for s in REQUIRED_SECRETS]
        assert "GITHUB_TOKEN" in env_vars


class TestValidateSecrets:
    """Tests for validate_secrets function."""

    def test_missing_token_for_publish(self):
        """Publishing without GITHUB_TOKEN is invalid."""
        valid, missing = validate_secrets("publish")
        assert valid is False
        assert missing == ["GitHub Token"]

    def test_whitespace_token_is_missing(self, monkeypatch):
        """A blank token counts as missing."""
        monkeypatch.setenv("GITHUB_TOKEN", "   ")
        valid, missing = validate_secrets("publish")
        assert valid is False

    def test_passes_when_set(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        assert validate_secrets("publish") == (True, [])

    def test_dry_run_needs_nothing(self):
        """Dry runs make no remote calls, so no secret is required."""
        assert validate_secrets("dry-run") == (True, [])
