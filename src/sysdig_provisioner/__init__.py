"""Terraform-style infrastructure-as-code for Sysdig Monitor and Sysdig Secure."""

__version__ = "0.1.0"
