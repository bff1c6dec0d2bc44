"""
Contract artifact lookup
Resolves compiled contract JSON (ABI + bytecode) by contract name
"""

import os
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Artifact:
    """Compiled contract descriptor"""
    contract_name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    source_path: Optional[str] = field(default=None, compare=False)

    def constructor_inputs(self) -> List[Dict[str, Any]]:
        for entry in self.abi:
            if entry.get('type') == 'constructor':
                return entry.get('inputs', [])
        return []


class ArtifactRegistry:
    """Looks up build artifacts in Truffle and Hardhat output layouts"""

    def __init__(self, search_dirs: Optional[List[str]] = None):
        if search_dirs is None:
            env_dirs = os.getenv("ARTIFACTS_DIR")
            search_dirs = [d for d in env_dirs.split(os.pathsep) if d] if env_dirs else [os.getcwd()]
        self.search_dirs = search_dirs

    def candidate_paths(self, name: str) -> List[str]:
        paths = []
        for base in self.search_dirs:
            paths.append(os.path.join(base, 'build', 'contracts', f'{name}.json'))
            paths.append(os.path.join(base, 'artifacts', 'contracts', f'{name}.sol', f'{name}.json'))
        return paths

    def require(self, name: str) -> Artifact:
        """
        Load the artifact for a contract name

        Args:
            name: Contract name, e.g. "RandomGenerator"

        Returns:
            Artifact with ABI and creation bytecode

        Raises:
            FileNotFoundError: no artifact file in any search location
            KeyError: artifact JSON has no ABI
            ValueError: artifact has no deployable bytecode
        """
        tried = self.candidate_paths(name)
        for path in tried:
            if not os.path.isfile(path):
                continue
            with open(path, 'r') as f:
                data = json.load(f)

            bytecode = data.get('bytecode') or ''
            if isinstance(bytecode, dict):
                # solc standard JSON output nests the hex under "object"
                bytecode = bytecode.get('object', '')
            if bytecode in ('', '0x'):
                raise ValueError(f"Artifact {name} at {path} has no bytecode (abstract contract or interface?)")
            if not bytecode.startswith('0x'):
                bytecode = '0x' + bytecode

            logger.info(f"Loaded artifact {name} from {path}")
            return Artifact(
                contract_name=data.get('contractName', name),
                abi=data['abi'],
                bytecode=bytecode,
                source_path=path,
            )

        raise FileNotFoundError(f"Could not find artifact for {name}. Tried: {', '.join(tried)}")
