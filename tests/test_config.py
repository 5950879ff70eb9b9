"""Tests for client configuration parsing."""

import pytest

from retry429.config import ClientConfig
from retry429.exceptions import ConfigurationError


class TestFromOptions:
    """Test building ClientConfig from caller options."""

    def test_defaults_disable_retry(self):
        config = ClientConfig.from_options({"https": True})

        assert config.retry_enabled is False
        assert config.retry_config().max_attempts == 1

    def test_retry_plugin_defaults_to_three_attempts(self):
        config = ClientConfig.from_options({"https": True, "plugin": "retry"})

        assert config.retry_enabled is True
        assert config.retry_config().max_attempts == 3

    def test_retry_attempts_overrides_default(self):
        config = ClientConfig.from_options({"plugin": "retry", "retryAttempts": 5})

        assert config.retry_config().max_attempts == 5

    def test_retry_attempts_alone_does_not_enable_retry(self):
        """The attempt ceiling only applies once retry is switched on."""
        config = ClientConfig.from_options({"retryAttempts": 5})

        assert config.retry_config().max_attempts == 1

    def test_retry_flag_enables_retry(self):
        config = ClientConfig.from_options({"retry": True, "retry_attempts": 4})

        assert config.retry_config().max_attempts == 4

    def test_plugin_list_selects_retry(self):
        config = ClientConfig.from_options({"plugins": ["retry"]})

        assert config.plugin == "retry"

    def test_initial_delay_in_milliseconds(self):
        config = ClientConfig.from_options({"plugin": "retry", "retryInitialDelayMsecs": 250})

        assert config.retry_config().base_delay == 0.25

    def test_delay_multiplier(self):
        config = ClientConfig.from_options({"plugin": "retry", "retryDelayMultiplier": 3})

        assert config.retry_config().multiplier == 3.0

    def test_unknown_options_pass_through_to_transport(self):
        config = ClientConfig.from_options({"https": True, "verify": False, "plugin": "retry"})

        assert dict(config.transport_options) == {"https": True, "verify": False}

    def test_caller_mapping_is_not_mutated(self):
        options = {"plugin": "retry", "retryAttempts": 5}

        ClientConfig.from_options(options)

        assert options == {"plugin": "retry", "retryAttempts": 5}


class TestValidation:
    """Test rejection of invalid options."""

    def test_unknown_plugin_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfig(plugin="cookieauth")

        assert exc_info.value.option == "plugin"

    @pytest.mark.parametrize("attempts", [0, -1])
    def test_non_positive_attempts_rejected(self, attempts):
        with pytest.raises(ConfigurationError):
            ClientConfig(plugin="retry", retry_attempts=attempts)

    def test_non_numeric_attempts_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfig.from_options({"retryAttempts": "many"})

        assert exc_info.value.option == "retry_attempts"

    def test_negative_delay_rejected(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(retry_initial_delay=-1)

    def test_config_is_immutable(self):
        config = ClientConfig()

        with pytest.raises(AttributeError):
            config.plugin = "retry"

    def test_transport_options_are_read_only(self):
        config = ClientConfig(transport_options={"verify": True})

        with pytest.raises(TypeError):
            config.transport_options["verify"] = False
