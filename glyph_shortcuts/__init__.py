"""
glyph_shortcuts
===============

Custom Finder context-menu shortcuts: shared configuration store,
placeholder substitution and invocation building.
"""

__all__ = [
	"bundles",
	"cli",
	"codec",
	"config",
	"errors",
	"icons",
	"library",
	"menu",
	"models",
	"runner",
	"store",
	"validation",
	"variables",
]
