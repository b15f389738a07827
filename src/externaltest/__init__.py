"""
externaltest - run script based tests from pytest.

This package provides tools to:
- Run an external test script in an isolated temporary directory
- Expose source and build directories to the script through its environment
- Report a non-zero exit or a terminating signal as a test failure
"""

__version__ = "0.1.0"
__author__ = "externaltest Team"
