# -*- coding: utf-8 -*-

""" diagrammar configuration. """

DEFAULT_LAYOUT = "triangle"
LAYOUTS = ("triangle", "linear")

# Default search budget of the commutativity engine.
DEFAULT_BUDGET = {
    "max_steps": 100_000,  # Node expansions, None for unbounded.
    "timeout": None,  # Wall-clock seconds, None for unbounded.
    "max_candidates": 64,  # Target morphisms tried per axiom morphism.
}

# Default xypic rendering parameters.
XYPIC_DEFAULT = {
    "curving": 3,  # In mm, multiplied for each extra parallel arrow.
    "loops": (("u", "l"), ("d", "r"), ("u", "r"), ("d", "l")),
    "conclusion_style": "{-->}",
    "diagram_format": "",
}

# Default matplotlib drawing parameters.
DRAWING_DEFAULT = {
    "fontsize": 14,
    "cellsize": 1.5,
    "margins": (.1, .1),
    "curving": .2,
    "loopsize": .3,
}
