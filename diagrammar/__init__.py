# -*- coding: utf-8 -*-

"""
diagrammar: laying out and proving the commutativity of diagrams in a
category.
"""

from diagrammar import (
    cat,
    graph,
    layout,
    commute,
    drawing,
    utils,
    config,
    messages,
)

__version__ = "0.1.0"
