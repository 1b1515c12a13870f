# !/usr/bin/python
# coding=utf-8
"""Node and scene graph utilities for Harmony.

All classes are lazy-loaded via harmonytk root package.
Import from harmonytk directly: from harmonytk import NodeUtils, MemoryScene
"""

# Lazy-loaded via parent package - no explicit imports needed
