# !/usr/bin/python
# coding=utf-8
"""Core utilities for Harmony.

All classes are lazy-loaded via harmonytk root package.
Import from harmonytk directly: from harmonytk import CoreUtils
"""

# Lazy-loaded via parent package - no explicit imports needed
