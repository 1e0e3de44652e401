"""
CDK infrastructure for the Session Manager demo.

Declares a three-tier VPC whose EC2 instances are reached through
Systems Manager Session Manager, with an optional Aurora MySQL cluster.
"""
