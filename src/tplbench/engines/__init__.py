"""Bundled template engine plugins.

Every public module in this package is a plugin exposing an ``ENGINE``
attribute (a :class:`tplbench.engine.BaseEngine` subclass). Modules are
discovered and imported by :class:`tplbench.registry.EngineRegistry`.
"""
