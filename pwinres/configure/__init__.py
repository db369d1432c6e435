# SPDX-License-Identifier: MIT
"""Build environment and package metadata."""
