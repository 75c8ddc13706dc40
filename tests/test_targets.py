"""Tests for targets module."""

import pytest

from package_builder.errors import ConfigurationError, UnknownTargetError
from package_builder.targets import DEFAULT_TARGETS, TARGET_TOKENS, resolve_targets
from package_builder.types import InitSystem, PackageFormat, Platform, Target

DARWIN = Target(Platform.DARWIN, InitSystem.LAUNCHD, PackageFormat.PKG)
RPM = Target(Platform.LINUX, InitSystem.SYSTEMD, PackageFormat.RPM)
DEB = Target(Platform.LINUX, InitSystem.SYSTEMD, PackageFormat.DEB)
UPSTART_DEB = Target(Platform.LINUX, InitSystem.UPSTART, PackageFormat.DEB)


class TestDefaults:
    """Test the default target set."""

    def test_empty_spec_returns_defaults_in_order(self) -> None:
        """Empty spec should return the four defaults in order."""
        assert resolve_targets("") == [DARWIN, RPM, DEB, UPSTART_DEB]

    def test_defaults_are_a_fresh_list(self) -> None:
        """Mutating the result should not affect later calls."""
        first = resolve_targets("")
        first.clear()
        assert len(resolve_targets("")) == 4
        assert len(DEFAULT_TARGETS) == 4


class TestTokens:
    """Test token resolution."""

    def test_vocabulary(self) -> None:
        """Token table should map the documented names."""
        assert TARGET_TOKENS == {"rpm": RPM, "deb": DEB, "darwin": DARWIN}

    @pytest.mark.parametrize(
        ("token", "expected"),
        [("rpm", RPM), ("deb", DEB), ("darwin", DARWIN)],
    )
    def test_single_token(self, token: str, expected: Target) -> None:
        """Each known token should resolve to its target."""
        assert resolve_targets(token) == [expected]

    def test_order_preserved(self) -> None:
        """Targets should come back in spec order."""
        assert resolve_targets("darwin,rpm") == [DARWIN, RPM]
        assert resolve_targets("rpm,darwin") == [RPM, DARWIN]

    def test_duplicates_preserved(self) -> None:
        """Repeated tokens should yield repeated targets."""
        assert resolve_targets("rpm,rpm") == [RPM, RPM]


class TestUnknownTokens:
    """Test rejection of unknown tokens."""

    def test_unknown_token_fails(self) -> None:
        """An unknown token should fail the whole resolution."""
        with pytest.raises(UnknownTargetError) as exc_info:
            resolve_targets("darwin,bogus")
        assert exc_info.value.token == "bogus"
        assert "bogus" in str(exc_info.value)
        assert exc_info.value.code == "unknown_target"

    def test_unknown_is_configuration_error(self) -> None:
        """Unknown targets are configuration errors."""
        with pytest.raises(ConfigurationError):
            resolve_targets("solaris")

    def test_case_sensitive(self) -> None:
        """Matching should be case-sensitive."""
        with pytest.raises(UnknownTargetError):
            resolve_targets("RPM")

    def test_whitespace_not_stripped(self) -> None:
        """Tokens should not be stripped."""
        with pytest.raises(UnknownTargetError) as exc_info:
            resolve_targets("darwin, rpm")
        assert exc_info.value.token == " rpm"

    def test_trailing_comma_is_empty_token(self) -> None:
        """A trailing comma yields an empty, unknown token."""
        with pytest.raises(UnknownTargetError) as exc_info:
            resolve_targets("rpm,")
        assert exc_info.value.token == ""
