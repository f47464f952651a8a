"""
Test Fakes Module

Provides fake implementations of typegraph ports for testing.
"""

from tests.fakes.fake_symbol_resolver import ROOT_TYPE, FakeSymbolResolver, FakeType

__all__ = [
    "FakeSymbolResolver",
    "FakeType",
    "ROOT_TYPE",
]
