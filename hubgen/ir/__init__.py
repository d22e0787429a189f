"""Intermediate representation of hub interfaces.

The IR is the closed set of type descriptors and the signatures built from
them. The loader builds it from definition documents; the transpiler reads
it to produce TypeScript declarations.
"""
