# -*- coding: utf-8 -*-
"""
Created on Thu Jan  9 20:40:18 2026

@author: epicx

Errors raised by the trip pipeline.
"""


class MalformedInputError(ValueError):
    """A trip record (or daily series) is missing something the pipeline needs."""


class InvalidConfigurationError(ValueError):
    """A pipeline parameter is out of range; raised before any computation."""
