"""
srdn-dist: npm distribution packaging for the srdn binary

Turns the prebuilt per-platform srdn binaries into npm packages: one package
per target triple, restricted by ``os``/``cpu``, plus the umbrella manifests
that pull the matching platform package in as an optional dependency.
"""

__version__ = "0.1.0"
__author__ = "Sardine Team"
__description__ = "npm distribution manifest generator for srdn"
