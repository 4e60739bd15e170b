"""Tests for security helpers."""

import logging

import pytest

from sharkbait.utils.security import (
    REDACTED,
    check_env_file_in_gitignore,
    sanitize_for_logging,
    warn_if_env_not_ignored,
)


class TestSanitizeForLogging:
    """Tests for sanitize_for_logging."""

    @pytest.mark.parametrize(
        ("text", "secret"),
        [
            ("export API_KEY=hunter2", "hunter2"),
            ("api-key: abc123", "abc123"),
            ("password='letmein'", "letmein"),
            ('{"password": "letmein"}', "letmein"),
            ("client secret=s3cr3t", "s3cr3t"),
            ("TOKEN=xyz789", "xyz789"),
            ("curl -H 'Authorization: Bearer abc.def-ghi'", "abc.def-ghi"),
            ("using key sk-proj-AbC123_xyz", "sk-proj-AbC123_xyz"),
        ],
    )
    def test_secrets_are_redacted(self, text, secret):
        sanitized = sanitize_for_logging(text)

        assert secret not in sanitized
        assert REDACTED in sanitized

    def test_bearer_scheme_is_kept(self):
        """Test only the credential after Bearer is hidden."""
        assert (
            sanitize_for_logging("Authorization: Bearer abc.def-ghi")
            == "Authorization: Bearer [REDACTED]"
        )

    @pytest.mark.parametrize("text", ["ls -la", "git push origin main", "echo hello"])
    def test_ordinary_text_unchanged(self, text):
        assert sanitize_for_logging(text) == text


class TestEnvGitignore:
    """Tests for .env commit protection."""

    @pytest.mark.parametrize("entry", [".env", "/.env", ".env*", "*.env", ".env  # local"])
    def test_ignored(self, tmp_path, entry):
        (tmp_path / ".gitignore").write_text(f"node_modules/\n{entry}\n")

        assert check_env_file_in_gitignore(tmp_path)

    def test_not_ignored(self, tmp_path):
        (tmp_path / ".gitignore").write_text("# .env\nbuild/\n")

        assert not check_env_file_in_gitignore(tmp_path)

    def test_no_gitignore(self, tmp_path):
        assert not check_env_file_in_gitignore(tmp_path)

    def test_warns_for_unignored_env_in_repo(self, tmp_path, caplog):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".env").write_text("X=1\n")

        with caplog.at_level(logging.WARNING):
            assert warn_if_env_not_ignored(tmp_path) is True

        assert ".gitignore" in caplog.text

    def test_no_warning_outside_repo(self, tmp_path):
        (tmp_path / ".env").write_text("X=1\n")

        assert warn_if_env_not_ignored(tmp_path) is False

    def test_no_warning_without_env_file(self, tmp_path):
        (tmp_path / ".git").mkdir()

        assert warn_if_env_not_ignored(tmp_path) is False
