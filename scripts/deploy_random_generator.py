#!/usr/bin/env python3
"""
RandomGenerator deployment
Deploys RandomGenerator with the SEED and OWNER constructor arguments
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from dotenv import load_dotenv

from offchain.deployer import Web3Deployer

logger = logging.getLogger(__name__)

ARTIFACT_NAME = "RandomGenerator"


@dataclass(frozen=True)
class DeploymentParameters:
    """Constructor arguments for RandomGenerator"""
    seed: Optional[str]
    owner: Optional[str]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DeploymentParameters":
        """Read SEED and OWNER; missing values are kept as None."""
        if environ is None:
            environ = os.environ
        return cls(seed=environ.get("SEED"), owner=environ.get("OWNER"))


class DeploymentStep:
    """
    Single deployment action for one artifact.

    The deployer is any object exposing ``deploy(artifact, *constructor_args)``,
    e.g. offchain.deployer.Web3Deployer.
    """

    def __init__(self, parameters: DeploymentParameters, artifact: Any = ARTIFACT_NAME):
        self.parameters = parameters
        self.artifact = artifact

    def run(self, deployer):
        seed, owner = self.parameters.seed, self.parameters.owner
        if seed is None or owner is None:
            logger.warning(f"Deploying {self.artifact} with missing constructor arguments: seed={seed!r}, owner={owner!r}")
        return deployer.deploy(self.artifact, seed, owner)


def migrate(deployer, parameters: Optional[DeploymentParameters] = None):
    """Deployment hook: run the RandomGenerator step once against the given deployer."""
    if parameters is None:
        parameters = DeploymentParameters.from_env()
    DeploymentStep(parameters).run(deployer)


def configure_logging(log_file: str = "deployment.log"):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def main():
    load_dotenv()
    configure_logging()

    try:
        migrate(Web3Deployer())
    except KeyboardInterrupt:
        logger.info("Deployment stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise


if __name__ == "__main__":
    main()
