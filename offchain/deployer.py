#!/usr/bin/env python3
"""
Web3 deployment runner
Submits contract-creation transactions for compiled artifacts and records the results
"""

import os
import json
import logging
import tempfile
import requests
from datetime import datetime
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from .artifacts import Artifact, ArtifactRegistry

logger = logging.getLogger(__name__)


class DeploymentError(Exception):
    """Deployment transaction was mined but reverted"""


@dataclass
class DeploymentRecord:
    """Result of a confirmed contract deployment"""
    contract_name: str
    address: str
    transaction_hash: str
    block_number: int
    constructor_args: List[Any]
    deployer: str
    chain_id: int
    deployed_at: str


def coerce_constructor_args(inputs: List[Dict[str, Any]], args: tuple) -> List[Any]:
    """
    Convert string arguments to the Python types web3 expects for each ABI input.

    Integer types accept decimal or 0x-prefixed strings, and address strings are
    checksummed. Anything else (including None) is passed through as-is and left
    for the ABI encoder to accept or reject.
    """
    coerced = []
    for index, value in enumerate(args):
        abi_type = inputs[index].get('type', '') if index < len(inputs) else ''
        if isinstance(value, str):
            if abi_type.startswith(('uint', 'int')) and '[' not in abi_type:
                text = value.strip()
                try:
                    value = int(text, 16) if text.lower().startswith('0x') else int(text, 10)
                except ValueError:
                    pass
            elif abi_type == 'address' and Web3.is_address(value):
                value = Web3.to_checksum_address(value)
        coerced.append(value)
    return coerced


class Web3Deployer:
    """Deploys contract artifacts over JSON-RPC with a single signing key"""

    def __init__(self, w3: Optional[Web3] = None, registry: Optional[ArtifactRegistry] = None):
        self.rpc_url = os.getenv("RPC_URL", "http://localhost:8545")
        self.private_key = os.getenv("PRIVATE_KEY")
        chain_id = os.getenv("CHAIN_ID")
        self.chain_id: Optional[int] = int(chain_id) if chain_id else None
        gas_limit = os.getenv("DEPLOY_GAS_LIMIT")
        self.gas_limit: Optional[int] = int(gas_limit) if gas_limit else None
        self.timeout = int(os.getenv("DEPLOY_TIMEOUT", "300"))
        self.deployment_path = os.getenv("DEPLOYMENT_FILE", "deployment.json")
        self.slack_webhook = os.getenv("SLACK_WEBHOOK")

        self.registry = registry if registry is not None else ArtifactRegistry()
        self.w3: Optional[Web3] = w3
        self.account: Optional[Any] = None

        self._initialize_web3()
        self._load_account()

    def _initialize_web3(self):
        """Initialize Web3 connection"""
        try:
            if self.w3 is None:
                self.w3 = Web3(Web3.HTTPProvider(self.rpc_url))
                self.w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
            if not self.w3.is_connected():
                raise ConnectionError(f"Could not connect to RPC URL: {self.rpc_url}")
            logger.info(f"Connected to blockchain at {self.rpc_url}")
        except Exception as e:
            logger.error(f"Failed to initialize Web3: {e}")
            raise

    def _load_account(self):
        if not self.private_key:
            raise ValueError("PRIVATE_KEY not found in environment")
        self.account = self.w3.eth.account.from_key(self.private_key)
        logger.info(f"Using deployer account: {self.account.address}")

    def deploy(self, artifact: Union[Artifact, str], *args) -> DeploymentRecord:
        """
        Deploy an artifact with the given constructor arguments

        Args:
            artifact: Artifact, or a contract name to resolve through the registry
            *args: Constructor arguments, in ABI order

        Returns:
            DeploymentRecord for the confirmed deployment
        """
        if isinstance(artifact, str):
            artifact = self.registry.require(artifact)

        constructor_args = coerce_constructor_args(artifact.constructor_inputs(), args)
        logger.info(f"Deploying {artifact.contract_name} with arguments {constructor_args}")

        try:
            chain_id = self.chain_id if self.chain_id is not None else self.w3.eth.chain_id
            contract = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
            tx_params = {
                'from': self.account.address,
                'nonce': self.w3.eth.get_transaction_count(self.account.address),
                'gasPrice': self.w3.eth.gas_price,
                'chainId': chain_id,
            }
            if self.gas_limit is not None:
                tx_params['gas'] = self.gas_limit
            tx = contract.constructor(*constructor_args).build_transaction(tx_params)

            signed_tx = self.w3.eth.account.sign_transaction(tx, self.private_key)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            tx_hash_hex = Web3.to_hex(tx_hash)
            logger.info(f"Deployment transaction sent: {tx_hash_hex}")

            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.timeout)
            if receipt['status'] != 1:
                raise DeploymentError(f"Deployment of {artifact.contract_name} reverted in transaction {tx_hash_hex}")
        except Exception as e:
            logger.error(f"Failed to deploy {artifact.contract_name}: {e}")
            raise

        record = DeploymentRecord(
            contract_name=artifact.contract_name,
            address=receipt['contractAddress'],
            transaction_hash=tx_hash_hex,
            block_number=receipt['blockNumber'],
            constructor_args=constructor_args,
            deployer=self.account.address,
            chain_id=chain_id,
            deployed_at=datetime.now().isoformat(),
        )
        logger.info(f"{record.contract_name} deployed at {record.address} (block {record.block_number})")

        try:
            self.record_deployment(record)
        except Exception as e:
            logger.error(f"Failed to record deployment: {e}")
        self._notify(record)
        return record

    def record_deployment(self, record: DeploymentRecord):
        """Merge a deployment into the deployment file, keeping other contracts"""
        addresses: Dict[str, Any] = {}
        if os.path.exists(self.deployment_path):
            with open(self.deployment_path, 'r') as f:
                addresses = json.load(f)

        addresses.setdefault('contracts', {})[record.contract_name] = record.address
        addresses.setdefault('transactions', {})[record.contract_name] = record.transaction_hash
        addresses.setdefault('roles', {})['deployer'] = record.deployer
        addresses['network'] = {
            'rpc_url': self.rpc_url,
            'chain_id': record.chain_id,
        }

        # Temp file in the same directory, then atomic replace
        target_dir = os.path.dirname(os.path.abspath(self.deployment_path))
        fd, tmp_path = tempfile.mkstemp(dir=target_dir, prefix='.deployment-', suffix='.json')
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(addresses, f, indent=2, default=str)
            os.replace(tmp_path, self.deployment_path)
        except Exception:
            os.unlink(tmp_path)
            raise
        logger.info(f"Deployment info written to {self.deployment_path}")

    def _notify(self, record: DeploymentRecord):
        if not self.slack_webhook:
            return
        try:
            self._send_slack_notification(record)
        except Exception as e:
            logger.error(f"Failed to send Slack notification: {e}")

    def _send_slack_notification(self, record: DeploymentRecord):
        """Send Slack deployment notification"""
        payload = {
            "text": f"{record.contract_name} deployed at {record.address}",
            "attachments": [
                {
                    "fields": [
                        {
                            "title": "Transaction",
                            "value": record.transaction_hash,
                            "short": False
                        },
                        {
                            "title": "Block",
                            "value": str(record.block_number),
                            "short": True
                        },
                        {
                            "title": "Deployer",
                            "value": record.deployer,
                            "short": True
                        }
                    ]
                }
            ]
        }

        response = requests.post(self.slack_webhook, json=payload, timeout=10)
        response.raise_for_status()
