"""
Offchain Deployment Runner
==========================

Web3 tooling that resolves compiled contract artifacts and submits
contract-creation transactions for the deployment scripts.
"""

from .artifacts import Artifact, ArtifactRegistry
from .deployer import DeploymentError, DeploymentRecord, Web3Deployer

__all__ = ['Artifact', 'ArtifactRegistry', 'DeploymentError', 'DeploymentRecord', 'Web3Deployer']
