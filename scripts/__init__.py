"""
Deployment Scripts
==================

Scripts for deploying the RandomGenerator contract.

Structure:
- deploy_random_generator: RandomGenerator deployment step and CLI entry point
"""

__version__ = "1.0.0"
