# -*- coding: utf-8 -*-

"""
diagrammar error messages.
"""

TYPE_ERROR = "Expected {}, got {} instead."
NOT_COMPOSABLE = "{} does not compose with {}: {} != {}."
IDENTITY_WITH_PROPERTIES = "Identity {} cannot have properties, got {}."
CONCLUSION_OUT_OF_PREMISES = "Conclusion {} is dropped: {} is not an object "\
                             "of the premises."
EMPTY_GROUP = "Groups must be non-empty."
OVERLAPPING_GROUPS = "Object {} belongs to both groups {} and {}."
NOT_IN_DIAGRAM = "Objects {} of group {} are not in the diagram, ignored."
UNKNOWN_LAYOUT = "Expected a layout in {}, got {!r} instead."
BUDGET_EXCEEDED = "Search budget exceeded after {} steps."
NOT_AN_EMBEDDING = "{} is not an embedding: {}"
