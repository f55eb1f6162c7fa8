"""Utility functions for sharesies."""

from sharesies.utils.env import load_env_file_if_present, parse_env_file

__all__ = ["load_env_file_if_present", "parse_env_file"]
