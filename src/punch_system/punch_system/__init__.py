"""Punch System package.

This package is organized by feature modules (workers, settings, punches, ...)
with a thin Flask controller layer and service/repository layers. The punch
resolver in ``punches`` is the decision core; everything else feeds it.
"""
