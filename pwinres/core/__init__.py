# SPDX-License-Identifier: MIT
"""Resource descriptor, .rc writer and errors."""
