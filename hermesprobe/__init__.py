"""
hermesprobe: locate and classify React Native bundles in decompiled Android apps.

Finds the JavaScript bundle inside a decompiled application tree, decides whether
it is Hermes bytecode or plain JavaScript, and reports the result as a single
machine-readable token for downstream tooling.
"""

__version__ = "1.0.0"
__author__ = "hermesprobe Team"
