"""Syntax-tree extraction engine - Ruby and jbuilder implementation modules."""
