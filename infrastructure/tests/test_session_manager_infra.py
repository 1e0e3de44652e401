"""
Unit tests for the CDK app entry point and its logging.
"""

import re

import pytest

from infrastructure import session_manager_infra
from infrastructure.utils.logging_utils import describe_topology, log_section_complete

TIMESTAMP = r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] "


class TestLogging:
    """Test log line formatting."""

    def test_section_complete_format(self, capsys):
        """Test completion lines carry a UTC timestamp and details."""
        log_section_complete("Synthesizing Demo", "done")
        line = capsys.readouterr().out.strip()
        assert re.match(TIMESTAMP + r"Completed: Synthesizing Demo - done$", line)

    def test_describe_topology(self):
        """Test the variant summary line."""
        summary = describe_topology({
            "include_database": False,
            "include_public_instance": True,
            "vpc_cidr": "10.1.0.0/16",
            "nat_gateways": 2,
        })
        assert summary == (
            "database=off, public instance=on, cidr=10.1.0.0/16, nat gateways=2"
        )


class TestMain:
    """Test synthesis through the app entry point."""

    @pytest.fixture(autouse=True)
    def _agnostic_config(self, monkeypatch):
        # Patch the class the entry point holds; other tests reload infrastructure.config
        config = session_manager_infra.Config
        monkeypatch.setattr(config, "STACK_NAME", "SessionManagerDemoStack")
        monkeypatch.setattr(config, "INCLUDE_DATABASE", "false")
        monkeypatch.setattr(config, "INCLUDE_PUBLIC_INSTANCE", "true")
        monkeypatch.setattr(config, "VPC_CIDR", "10.0.0.0/16")
        monkeypatch.setattr(config, "NAT_GATEWAYS", "1")
        monkeypatch.setattr(config, "AWS_ACCOUNT_ID", None)
        monkeypatch.delenv("CDK_OUTDIR", raising=False)

    def test_main_synthesizes_and_logs(self, capsys):
        """Test a valid configuration synthesizes and logs start and completion."""
        session_manager_infra.main()

        lines = capsys.readouterr().out.strip().splitlines()
        assert re.match(TIMESTAMP + r"Starting: Synthesizing SessionManagerDemoStack$", lines[0])
        assert "environment-agnostic" in lines[1]
        assert lines[-1].endswith(
            "Completed: Synthesizing SessionManagerDemoStack - "
            "database=off, public instance=on, cidr=10.0.0.0/16, nat gateways=1"
        )

    def test_main_logs_and_raises_on_invalid_config(self, monkeypatch, capsys):
        """Test invalid configuration is logged and stops synthesis."""
        monkeypatch.setattr(session_manager_infra.Config, "NAT_GATEWAYS", "0")

        with pytest.raises(ValueError):
            session_manager_infra.main()

        output = capsys.readouterr().out
        assert "Error in Synthesizing SessionManagerDemoStack: Invalid configuration" in output
        assert "Completed" not in output
