#!/usr/bin/env python3
"""
AWS CDK App for the Session Manager demo infrastructure
"""

import aws_cdk as cdk

from infrastructure.config import Config
from infrastructure.session_manager.session_manager_stack import SessionManagerDemoStack
from infrastructure.utils.logging_utils import (
    describe_topology,
    log_error,
    log_progress,
    log_section_complete,
    log_section_start,
)


def main() -> None:
    section = f"Synthesizing {Config.STACK_NAME}"
    log_section_start(section)

    try:
        Config.validate()
    except ValueError as e:
        log_error(section, e)
        raise

    options = Config.topology_options()
    env = Config.get_environment()
    if env.account is None:
        log_progress(section, "No AWS account configured, synthesizing environment-agnostic stack")

    app = cdk.App()
    SessionManagerDemoStack(app, Config.STACK_NAME, env=env, **options)
    app.synth()

    log_section_complete(section, describe_topology(options))


if __name__ == "__main__":
    main()
