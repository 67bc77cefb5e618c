"""attrcomplete - context-sensitive completion for resource attributes.

Computes the next legal tokens of a partially typed command line from a
resource's declarative attribute schema: attribute names (including regex keyed
and array-indexed ones), attribute values, and filter query fragments.
Conditionally visible attributes are only offered while their predicate holds.
"""
