"""
Configuration module for the Session Manager demo CDK app.

Reads environment variables (optionally seeded from a .env file in the
project root) and provides the topology options, target environment and
validation used when synthesizing the stack.
"""

import ipaddress
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import aws_cdk as cdk
from dotenv import load_dotenv

# Existing environment variables take precedence over the .env file
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=False)

TRUE_VALUES = ("true", "yes", "1")
FALSE_VALUES = ("false", "no", "0")

# CloudFormation stack names: letter first, then letters, digits and hyphens
STACK_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9-]{0,127}$")


def _parse_flag(value: str) -> bool:
    """
    Interpret a boolean environment variable value.

    Args:
        value: Raw (already lower-cased) environment variable value.

    Returns:
        bool: True for true/yes/1, False for false/no/0.

    Raises:
        ValueError: If the value is not a recognised boolean literal.
    """
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"'{value}' is not a boolean value")


class Config:
    """
    Configuration class that reads environment variables for the CDK app.
    """

    # Stack Configuration
    STACK_NAME: str = os.getenv("STACK_NAME", "SessionManagerDemoStack")
    PROJECT_TAG: str = "session-manager-demo"

    # Topology variants
    INCLUDE_DATABASE: str = os.getenv("INCLUDE_DATABASE", "true").strip().lower()
    INCLUDE_PUBLIC_INSTANCE: str = (
        os.getenv("INCLUDE_PUBLIC_INSTANCE", "true").strip().lower()
    )

    # Network Configuration
    VPC_CIDR: str = os.getenv("VPC_CIDR", "10.0.0.0/16").strip()
    NAT_GATEWAYS: str = os.getenv("NAT_GATEWAYS", "1").strip()
    MAX_AZS: int = 2

    # AWS Environment
    AWS_ACCOUNT_ID: Optional[str] = os.getenv(
        "AWS_ACCOUNT_ID", os.getenv("CDK_DEFAULT_ACCOUNT")
    )
    AWS_REGION: str = os.getenv("AWS_DEFAULT_REGION", "us-east-1")

    @classmethod
    def database_enabled(cls) -> bool:
        """Whether the Aurora cluster variant is declared."""
        return _parse_flag(cls.INCLUDE_DATABASE)

    @classmethod
    def public_instance_enabled(cls) -> bool:
        """Whether the ingress-tier instance is declared."""
        return _parse_flag(cls.INCLUDE_PUBLIC_INSTANCE)

    @classmethod
    def nat_gateway_count(cls) -> int:
        """Number of NAT gateways shared by the application tier."""
        return int(cls.NAT_GATEWAYS)

    @classmethod
    def validate(cls) -> None:
        """
        Validate that every configuration value can be used to build the stack.

        Raises:
            ValueError: If any configuration value is invalid. All problems
                are reported in a single message.
        """
        errors = []

        if not STACK_NAME_PATTERN.match(cls.STACK_NAME):
            errors.append(f"STACK_NAME '{cls.STACK_NAME}' is not a valid stack name")

        for name, value in (
            ("INCLUDE_DATABASE", cls.INCLUDE_DATABASE),
            ("INCLUDE_PUBLIC_INSTANCE", cls.INCLUDE_PUBLIC_INSTANCE),
        ):
            if value not in TRUE_VALUES + FALSE_VALUES:
                errors.append(f"{name} must be one of true/false/yes/no/1/0")

        try:
            network = ipaddress.IPv4Network(cls.VPC_CIDR)
        except ValueError:
            errors.append(f"VPC_CIDR '{cls.VPC_CIDR}' is not an IPv4 network")
        else:
            if not 16 <= network.prefixlen <= 24:
                errors.append("VPC_CIDR prefix length must be between /16 and /24")

        if not cls.NAT_GATEWAYS.isdigit() or not (
            1 <= int(cls.NAT_GATEWAYS) <= cls.MAX_AZS
        ):
            errors.append(f"NAT_GATEWAYS must be an integer between 1 and {cls.MAX_AZS}")

        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    @classmethod
    def topology_options(cls) -> Dict[str, Any]:
        """
        Build the keyword arguments for SessionManagerDemoStack.

        Returns:
            Dict with include_database, include_public_instance, vpc_cidr
            and nat_gateways.
        """
        return {
            "include_database": cls.database_enabled(),
            "include_public_instance": cls.public_instance_enabled(),
            "vpc_cidr": cls.VPC_CIDR,
            "nat_gateways": cls.nat_gateway_count(),
        }

    @classmethod
    def get_environment(cls) -> cdk.Environment:
        """
        Build the CDK deployment environment.

        An unset account leaves the stack environment-agnostic.
        """
        return cdk.Environment(account=cls.AWS_ACCOUNT_ID, region=cls.AWS_REGION)
