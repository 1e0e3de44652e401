"""Shared helpers for the CDK app."""
